# exporter.py
import csv
import os
from datetime import datetime
from pathlib import Path

import gspread

from config import SHEET_TITLE
from fare_parser import describe_leg, format_money

RESULT_COLUMNS = ["From", "To", "Depart", "Return", "Price To", "Price Back", "Total"]
FARE_COLUMNS = ["Outbound Flight", "Return Flight", "Outbound Price", "Return Price", "Total Price"]


def results_filename(prefix: str = "ryanair_results", now: datetime | None = None, ext: str = "csv") -> str:
    """Timestamped name like ryanair_results_010624_0930.csv so runs never overwrite each other."""
    now = now or datetime.now()
    return f"{prefix}_{now:%d%m%y_%H%M}.{ext}"


def itinerary_row(trip: dict) -> list[str]:
    return [
        trip["from"],
        trip["to"],
        trip["depart"],
        trip["return"],
        f"{trip['price_to']:.2f}",
        f"{trip['price_back']:.2f}",
        f"{trip['total']:.2f}",
    ]


def fare_row(fare: dict) -> list[str]:
    return [
        describe_leg(fare["outbound"]),
        describe_leg(fare["inbound"]),
        format_money(fare["outbound"]["price"]),
        format_money(fare["inbound"]["price"]),
        format_money(fare["summary"]["price"]),
    ]


def _write_csv(header: list[str], rows: list[list[str]], filepath: Path) -> Path:
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return filepath


def write_results_csv(itineraries: list[dict], directory: str | os.PathLike, now: datetime | None = None) -> Path:
    """Write every itinerary to a new timestamped CSV in directory and return its path."""
    filepath = Path(directory) / results_filename("ryanair_results", now)
    return _write_csv(RESULT_COLUMNS, [itinerary_row(t) for t in itineraries], filepath)


def write_fares_csv(fares: list[dict], directory: str | os.PathLike, now: datetime | None = None) -> Path:
    """Write raw fare-finder fares with flight times and airports."""
    filepath = Path(directory) / results_filename("ryanair_fares", now)
    return _write_csv(FARE_COLUMNS, [fare_row(f) for f in fares], filepath)


def write_results_sheet(
    itineraries: list[dict],
    spreadsheet_id: str,
    credentials_file: str | os.PathLike,
    sheet_title: str = SHEET_TITLE,
) -> str:
    """Replace the contents of a Google Sheet tab with the itineraries.

    The tab is created if the spreadsheet does not have it yet.
    """
    rows = [itinerary_row(t) for t in itineraries]

    gc = gspread.service_account(filename=str(credentials_file))
    spreadsheet = gc.open_by_key(spreadsheet_id)
    try:
        worksheet = spreadsheet.worksheet(sheet_title)
    except gspread.WorksheetNotFound:
        worksheet = spreadsheet.add_worksheet(
            title=sheet_title, rows=len(rows) + 1, cols=len(RESULT_COLUMNS)
        )

    worksheet.clear()
    worksheet.append_rows([RESULT_COLUMNS] + rows, value_input_option="USER_ENTERED")
    return sheet_title
