# fare_parser.py
import re
from datetime import date
from decimal import Decimal, InvalidOperation


def parse_price(price_str: str) -> Decimal | None:
    """Parse a displayed price like '€1,234.56' or '1 234,56 zł' to a Decimal.

    When both ',' and '.' appear, the last one is the decimal separator.
    A single separator followed by exactly three digits groups thousands.
    """
    if not price_str:
        return None
    cleaned = re.sub(r"[^\d,.]", "", price_str).strip(",.")
    if not cleaned or not re.search(r"\d", cleaned):
        return None

    last_comma = cleaned.rfind(",")
    last_dot = cleaned.rfind(".")
    if last_comma != -1 and last_dot != -1:
        decimal_sep = "," if last_comma > last_dot else "."
        thousands_sep = "." if decimal_sep == "," else ","
        cleaned = cleaned.replace(thousands_sep, "").replace(decimal_sep, ".")
    elif last_comma != -1 or last_dot != -1:
        sep = "," if last_comma != -1 else "."
        whole, _, frac = cleaned.rpartition(sep)
        if len(frac) == 3 or cleaned.count(sep) > 1:
            cleaned = cleaned.replace(sep, "")
        else:
            cleaned = whole.replace(sep, "") + "." + frac

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def _leg_date(leg: dict) -> date:
    # departureDate is a local ISO datetime, e.g. '2024-06-01T06:30:00'
    return date.fromisoformat(leg["departureDate"][:10])


def _leg_price(leg: dict) -> Decimal:
    return Decimal(str(leg["price"]["value"]))


def parse_round_trip_fares(payload: dict) -> list[dict]:
    """Pull the fare list out of a roundTripFares API response.

    Fares with a missing leg or price are dropped.
    """
    fares = []
    for fare in payload.get("fares") or []:
        try:
            for leg_key in ("outbound", "inbound"):
                leg = fare[leg_key]
                _leg_date(leg)
                _leg_price(leg)
        except (KeyError, TypeError, ValueError, InvalidOperation):
            continue
        fares.append(fare)
    return fares


def leg_price_tables(fares: list[dict]) -> tuple[dict, dict]:
    """Cheapest outbound and inbound price per departure date.

    Returns ({date: Decimal}, {date: Decimal}) for outbound and inbound legs.
    """
    outbound: dict[date, Decimal] = {}
    inbound: dict[date, Decimal] = {}
    for fare in fares:
        for leg_key, table in (("outbound", outbound), ("inbound", inbound)):
            leg = fare[leg_key]
            day = _leg_date(leg)
            price = _leg_price(leg)
            if day not in table or price < table[day]:
                table[day] = price
    return outbound, inbound


def describe_leg(leg: dict) -> str:
    """'2024-06-01T06:30:00 - 2024-06-01T09:40:00 (Warsaw -> Barcelona)'."""
    return (
        f"{leg['departureDate']} - {leg['arrivalDate']} "
        f"({leg['departureAirport']['name']} -> {leg['arrivalAirport']['name']})"
    )


def format_money(price: dict) -> str:
    """{'value': 49.99, 'currencyCode': 'EUR'} -> '49.99 EUR'."""
    value = Decimal(str(price["value"])).quantize(Decimal("0.01"))
    return f"{value} {price['currencyCode']}"
