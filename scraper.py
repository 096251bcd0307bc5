# scraper.py
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import partial

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from config import (
    DATE_CELL_TIMEOUT_MS,
    FARE_CARD_TIMEOUT_MS,
    FARE_FINDER_TIMEOUT_MS,
    SLEEP_MAX_SEC,
    SLEEP_MIN_SEC,
    WIDGET_TIMEOUT_MS,
)
from fare_parser import leg_price_tables, parse_price, parse_round_trip_fares
from url_builder import FARES_API_MARKER, HOME_URL, build_fare_finder_url

SPINNER = ".shell__spinner"
SEARCH_WIDGET = '[data-ref="flight-search-widget"]'
DEPARTURE_INPUT = '[data-ref="input-button__departure"]'
DESTINATION_INPUT = '[data-ref="input-button__destination"]'
DATES_FROM_BUTTON = '[data-ref="date-input-button__dates-from"]'
SEARCH_BUTTON = '[data-ref="flight-search-widget__cta"]'
FARE_CARD = ".fare-card"
FARE_CARD_PRICE = ".fare-card .fare-card__price"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one leg lookup: a price, or the reason there is none."""

    price: Decimal | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.price is not None

    @classmethod
    def found(cls, price: Decimal) -> "LookupResult":
        return cls(price=price)

    @classmethod
    def failed(cls, reason: str) -> "LookupResult":
        return cls(reason=reason)


def _check_price(price: Decimal | None) -> LookupResult:
    if price is None:
        return LookupResult.failed("unparsable price")
    if price <= 0:
        return LookupResult.failed(f"non-positive price {price}")
    return LookupResult.found(price)


@contextmanager
def browser_session(headless: bool = True):
    """Launch Chromium and yield the single page every lookup shares.

    Launch errors propagate: without a browser there is nothing to run.
    """
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=headless)
        try:
            yield browser.new_page()
        finally:
            browser.close()


def _enter_airport(page, selector: str, code: str) -> None:
    field = page.locator(selector)
    field.fill("")
    field.press_sequentially(code)
    page.keyboard.press("Enter")


def find_flight_price(page, origin: str, destination: str, day: date) -> LookupResult:
    """Search one leg through the ryanair.com search widget and read the first fare card."""
    try:
        page.goto(HOME_URL, wait_until="domcontentloaded")
        page.wait_for_selector(SPINNER, state="visible")
        page.wait_for_selector(SPINNER, state="hidden")
        page.wait_for_selector(SEARCH_WIDGET, timeout=WIDGET_TIMEOUT_MS)

        _enter_airport(page, DEPARTURE_INPUT, origin)
        _enter_airport(page, DESTINATION_INPUT, destination)

        page.click(DATES_FROM_BUTTON)
        date_cell = f'[aria-label="{day.isoformat()}"]'
        page.wait_for_selector(date_cell, timeout=DATE_CELL_TIMEOUT_MS)
        page.click(date_cell)
        page.click(SEARCH_BUTTON)

        page.wait_for_selector(FARE_CARD, timeout=FARE_CARD_TIMEOUT_MS)
        price_text = page.locator(FARE_CARD_PRICE).first.inner_text()
    except PlaywrightError as e:
        return LookupResult.failed(f"{type(e).__name__}: {e}")

    return _check_price(parse_price(price_text))


def fetch_round_trip_fares(page, url: str, timeout_ms: int = FARE_FINDER_TIMEOUT_MS) -> list[dict]:
    """Open the fare-finder page and return the fares from its roundTripFares response."""
    with page.expect_response(
        lambda r: FARES_API_MARKER in r.url and r.status == 200,
        timeout=timeout_ms,
    ) as response_info:
        page.goto(url, wait_until="domcontentloaded")
    return parse_round_trip_fares(response_info.value.json())


class FareFinderLookup:
    """Answer leg lookups from the fare-finder API, one page load per route.

    Call ``for_route(route)`` before pricing a route: it loads that route's
    fares for the month once and returns the leg lookup for it. Outbound
    legs price origin->destination and inbound legs the reverse direction.
    Raw fares are kept in ``fares`` for the detail export.
    """

    def __init__(self, page, trip_length: int, month: str, adults: int = 1,
                 children: int = 0, currency: str = "EUR"):
        self.page = page
        self.trip_length = trip_length
        self.month = month
        self.adults = adults
        self.children = children
        self.currency = currency
        self.fares: list[dict] = []
        # (origin, destination) of a processed route -> (outbound, inbound) tables
        self._routes: dict[tuple[str, str], tuple[dict, dict]] = {}
        self._errors: dict[tuple[str, str], str] = {}

    def _load_route(self, origin: str, destination: str) -> None:
        key = (origin, destination)
        url = build_fare_finder_url(
            origin, destination, self.trip_length, self.month,
            n_adults=self.adults, n_children=self.children, currency=self.currency,
        )
        print(f"  Loading fare finder: {url}")
        try:
            fares = fetch_round_trip_fares(self.page, url)
        except (PlaywrightError, ValueError) as e:
            self._routes[key] = ({}, {})
            self._errors[key] = f"{type(e).__name__}: {e}"
            return

        self.fares.extend(fares)
        self._routes[key] = leg_price_tables(fares)

    def price(self, route_key: tuple[str, str], origin: str, destination: str, day: date) -> LookupResult:
        """Price one leg of the route loaded under route_key."""
        if route_key not in self._routes:
            self._load_route(*route_key)
        if route_key in self._errors:
            return LookupResult.failed(self._errors[route_key])

        outbound, inbound = self._routes[route_key]
        if (origin, destination) == route_key:
            table = outbound
        elif (destination, origin) == route_key:
            table = inbound
        else:
            return LookupResult.failed(f"{origin}->{destination} is not a leg of {route_key[0]}->{route_key[1]}")

        price = table.get(day)
        if price is None:
            return LookupResult.failed(f"no fare for {day.isoformat()}")
        return _check_price(price)

    def for_route(self, route: dict):
        """Leg lookup bound to one route, loading its fares on first use."""
        return partial(self.price, (route["from"], route["to"]))


def random_delay() -> None:
    """Sleep for a random duration to be polite to the site."""
    if SLEEP_MAX_SEC <= 0:
        return
    time.sleep(random.uniform(SLEEP_MIN_SEC, SLEEP_MAX_SEC))
