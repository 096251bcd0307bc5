# tests/test_fare_parser.py
from datetime import date
from decimal import Decimal

import pytest

from fare_parser import (
    describe_leg,
    format_money,
    leg_price_tables,
    parse_price,
    parse_round_trip_fares,
)


def _leg(dep, arr, price, frm="Warsaw", to="Barcelona"):
    return {
        "departureAirport": {"iataCode": "WAW", "name": frm},
        "arrivalAirport": {"iataCode": "BCN", "name": to},
        "departureDate": dep,
        "arrivalDate": arr,
        "price": {"value": price, "currencyCode": "EUR"},
    }


def _fare(out_day, in_day, out_price, in_price):
    return {
        "outbound": _leg(f"{out_day}T06:30:00", f"{out_day}T09:40:00", out_price),
        "inbound": _leg(f"{in_day}T10:15:00", f"{in_day}T13:20:00", in_price, "Barcelona", "Warsaw"),
        "summary": {"price": {"value": out_price + in_price, "currencyCode": "EUR"}},
    }


@pytest.mark.parametrize("text,expected", [
    ("€49.99", Decimal("49.99")),
    ("€1,234.56", Decimal("1234.56")),
    ("1 234,56 zł", Decimal("1234.56")),
    ("1.234,56 €", Decimal("1234.56")),
    ("12,5", Decimal("12.5")),
    ("€1,234", Decimal("1234")),
    ("£120", Decimal("120")),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["", "Sold out", "€"])
def test_parse_price_unparsable(text):
    assert parse_price(text) is None


def test_parse_round_trip_fares_drops_incomplete():
    payload = {"fares": [
        _fare("2024-06-01", "2024-06-08", 50.0, 60.0),
        {"outbound": _leg("2024-06-02T06:30:00", "2024-06-02T09:40:00", 40.0)},
        {"outbound": {"departureDate": "2024-06-03"}, "inbound": {}},
    ]}
    fares = parse_round_trip_fares(payload)
    assert len(fares) == 1


def test_parse_round_trip_fares_empty_payload():
    assert parse_round_trip_fares({}) == []
    assert parse_round_trip_fares({"fares": None}) == []


def test_leg_price_tables_keeps_cheapest_per_date():
    fares = [
        _fare("2024-06-01", "2024-06-08", 50.0, 60.0),
        _fare("2024-06-01", "2024-06-07", 45.5, 70.0),
        _fare("2024-06-02", "2024-06-08", 30.0, 55.25),
    ]
    outbound, inbound = leg_price_tables(fares)
    assert outbound == {
        date(2024, 6, 1): Decimal("45.5"),
        date(2024, 6, 2): Decimal("30.0"),
    }
    assert inbound[date(2024, 6, 8)] == Decimal("55.25")
    assert inbound[date(2024, 6, 7)] == Decimal("70.0")


def test_describe_leg_and_money():
    fare = _fare("2024-06-01", "2024-06-08", 50.0, 60.0)
    assert describe_leg(fare["outbound"]) == (
        "2024-06-01T06:30:00 - 2024-06-01T09:40:00 (Warsaw -> Barcelona)"
    )
    assert format_money(fare["summary"]["price"]) == "110.00 EUR"
