# main.py
import argparse
import sys
from datetime import date
from decimal import Decimal
from functools import partial
from pathlib import Path

import gspread
from google.auth.exceptions import GoogleAuthError

from config import (
    CONFIG_FILE,
    ERRORS_LOG,
    GOOGLE_SERVICE_ACCOUNT_FILE,
    GOOGLE_SHEET_ID,
    LOOKUPS,
    OUTPUT_DIR,
    OUTPUTS,
    TOP_N,
    ConfigError,
    DatePairs,
    load_config,
)
from exporter import write_fares_csv, write_results_csv, write_results_sheet
from filter_and_rank import format_summary
from scraper import FareFinderLookup, browser_session, find_flight_price, random_delay


def log_error(msg: str) -> None:
    """Print an error and append it to the error log file."""
    print(f"  ERROR: {msg}")
    with open(ERRORS_LOG, "a", encoding="utf-8") as f:
        f.write(f"{msg}\n")


def make_itinerary(route: dict, depart: date, ret: date, price_to: Decimal, price_back: Decimal) -> dict:
    """Build a priced round trip; total is always derived from the two legs."""
    return {
        "from": route["from"],
        "to": route["to"],
        "depart": depart.isoformat(),
        "return": ret.isoformat(),
        "price_to": price_to,
        "price_back": price_back,
        "total": price_to + price_back,
    }


def process_route(lookup, route: dict, date_pairs, pause=None) -> list[dict]:
    """Price every date pair of one route, outbound first, then inbound.

    A pair is dropped when either leg has no price; the inbound leg is only
    looked up once the outbound one succeeded.
    """
    origin, dest = route["from"], route["to"]
    results = []

    for i, (depart, ret) in enumerate(date_pairs):
        if i and pause:
            pause()
        print(f"  Checking {origin} -> {dest}, {depart} -> {ret}")

        outbound = lookup(origin, dest, depart)
        if not outbound.ok:
            log_error(f"{origin},{dest},{depart},{outbound.reason}")
            continue

        inbound = lookup(dest, origin, ret)
        if not inbound.ok:
            log_error(f"{dest},{origin},{ret},{inbound.reason}")
            continue

        trip = make_itinerary(route, depart, ret, outbound.price, inbound.price)
        results.append(trip)
        print(f"    {trip['price_to']:.2f} + {trip['price_back']:.2f} = {trip['total']:.2f}")

    return results


def make_lookup(config: dict, page):
    """Pick the price lookup named by the config's "lookup" field."""
    if config["lookup"] == "farefinder":
        return FareFinderLookup(
            page,
            config["trip_length"],
            config["month"],
            adults=config["adults"],
            children=config["children"],
            currency=config["currency"],
        )
    if config["lookup"] not in LOOKUPS:
        log_error(f'Unknown lookup "{config["lookup"]}", using the browser search')
    return partial(find_flight_price, page)


def lookup_for_route(lookup, route: dict):
    """Fare-finder lookups are bound to the route they load; others serve any leg."""
    if isinstance(lookup, FareFinderLookup):
        return lookup.for_route(route)
    return lookup


def export_results(
    itineraries: list[dict],
    output: str,
    directory=OUTPUT_DIR,
    fares: list[dict] | None = None,
    spreadsheet_id: str | None = GOOGLE_SHEET_ID,
    credentials_file=GOOGLE_SERVICE_ACCOUNT_FILE,
    now=None,
):
    """Send the full result set to the sink named by output.

    Returns the written file path or sheet title, or None when nothing was exported.
    """
    if output not in OUTPUTS:
        log_error(f'Unknown output "{output}". Use one of {", ".join(OUTPUTS)} in {CONFIG_FILE}')
        return None

    try:
        if output == "csv":
            path = write_results_csv(itineraries, directory, now=now)
            print(f"\nCSV file written: {path}")
            if fares:
                fares_path = write_fares_csv(fares, directory, now=now)
                print(f"Fare details written: {fares_path}")
            return path

        if not spreadsheet_id:
            log_error("GOOGLE_SHEET_ID is not set, skipping Google Sheets export")
            return None
        title = write_results_sheet(itineraries, spreadsheet_id, credentials_file)
        print(f"\nAll rows written to Google Sheet tab '{title}'.")
        return title
    except (OSError, ValueError, gspread.exceptions.GSpreadException, GoogleAuthError) as e:
        log_error(f"Export to {output} failed: {e}")
        return None


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Find the cheapest Ryanair round trips for a month.")
    parser.add_argument("config", nargs="?", default=CONFIG_FILE, help=f"routes file (default: {CONFIG_FILE})")
    parser.add_argument("--headful", action="store_true", help="show the browser window")
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR, help="where result files are written")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        log_error(str(e))
        return 1

    date_pairs = DatePairs(config["month"], config["trip_length"])
    routes = config["routes"]

    print("Ryanair Round Trip Price Monitor")
    print(f"Month: {config['month']} | Trip length: {config['trip_length']} days")
    print(f"Routes: {len(routes)} | Lookup: {config['lookup']} | Output: {config['output']}")
    print("---")

    results = []
    fares = None
    with browser_session(headless=not args.headful) as page:
        lookup = make_lookup(config, page)
        try:
            for route in routes:
                print(f"Processing route {route['from']} -> {route['to']}")
                route_lookup = lookup_for_route(lookup, route)
                results.extend(process_route(route_lookup, route, date_pairs, pause=random_delay))
                print(f"Finished route {route['from']} -> {route['to']}")
        except KeyboardInterrupt:
            print(f"\n\nInterrupted! Keeping {len(results)} round trips found so far.")
        if isinstance(lookup, FareFinderLookup):
            fares = lookup.fares

    print(f"\n{'='*60}")
    print(format_summary(results, TOP_N, config["currency"]))

    export_results(results, config["output"], args.output_dir, fares=fares)
    return 0


if __name__ == "__main__":
    sys.exit(main())
