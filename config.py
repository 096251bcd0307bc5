# config.py
import calendar
import json
import os
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Output files land next to the program unless the caller passes a directory
OUTPUT_DIR = Path(__file__).resolve().parent
CONFIG_FILE = "routes.json"
ERRORS_LOG = "errors.log"

DEFAULT_ADULTS = 1
DEFAULT_CHILDREN = 0
DEFAULT_CURRENCY = "EUR"
DEFAULT_LOOKUP = "browser"
OUTPUTS = ("csv", "google")
LOOKUPS = ("browser", "farefinder")

# Browser timeouts (milliseconds)
WIDGET_TIMEOUT_MS = 60_000
DATE_CELL_TIMEOUT_MS = 5_000
FARE_CARD_TIMEOUT_MS = 10_000
FARE_FINDER_TIMEOUT_MS = 60_000

# Pause between date pairs; set both to 0 to disable
SLEEP_MIN_SEC = 1
SLEEP_MAX_SEC = 3

TOP_N = 3

# Google Sheets sink
SHEET_TITLE = "Ryanair Roundtrips"
GOOGLE_SHEET_ID = os.getenv("GOOGLE_SHEET_ID")
GOOGLE_SERVICE_ACCOUNT_FILE = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "service_account.json")


class ConfigError(ValueError):
    """Raised when the routes file is missing or not valid JSON."""


def load_config(path: str | os.PathLike = CONFIG_FILE) -> dict:
    """Read the run configuration from a JSON file.

    Only the JSON itself is checked; optional fields get their defaults.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    try:
        return {
            "trip_length": int(raw["tripLength"]),
            "month": raw["month"],
            "routes": tuple({"from": r["from"], "to": r["to"]} for r in raw["routes"]),
            "output": raw.get("output", "csv"),
            "adults": int(raw.get("adults", DEFAULT_ADULTS)),
            "children": int(raw.get("children", DEFAULT_CHILDREN)),
            "lookup": raw.get("lookup", DEFAULT_LOOKUP),
            "currency": raw.get("currency", DEFAULT_CURRENCY),
        }
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Config file {path} is missing or has a bad field: {e}") from e


def parse_month(month: str) -> tuple[int, int]:
    """'2024-06' -> (2024, 6)."""
    year, mon = month.split("-")
    return int(year), int(mon)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, mon = parse_month(month)
    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


def iter_date_pairs(month: str, trip_length: int):
    """Yield (depart, return) date pairs inside the month for a fixed trip length.

    Stops at the first pair whose return date falls past the last day of the month.
    """
    current, end = month_bounds(month)
    while True:
        ret = current + timedelta(days=trip_length)
        if ret > end:
            return
        yield current, ret
        current += timedelta(days=1)


class DatePairs:
    """Restartable iterable over iter_date_pairs(month, trip_length)."""

    def __init__(self, month: str, trip_length: int):
        self.month = month
        self.trip_length = trip_length

    def __iter__(self):
        return iter_date_pairs(self.month, self.trip_length)

    def __repr__(self):
        return f"DatePairs(month={self.month!r}, trip_length={self.trip_length})"
