# url_builder.py
from urllib.parse import urlencode

from config import month_bounds

HOME_URL = "https://www.ryanair.com"
FARE_FINDER_URL = "https://www.ryanair.com/us/en/fare-finder"
FARES_API_MARKER = "roundTripFares"


def build_fare_finder_url(
    origin: str,
    destination: str,
    trip_length: int,
    month: str,
    n_adults: int = 1,
    n_children: int = 0,
    currency: str = "EUR",
) -> str:
    """Build a fare-finder URL covering the whole month for a round trip.

    The page fires a roundTripFares API request that returns every fare
    within one night either side of the trip length.
    """
    first, last = month_bounds(month)

    params = {
        "originIata": origin,
        "destinationIata": destination,
        "isReturn": "true",
        "isMacDestination": "false",
        "promoCode": "",
        "adults": n_adults,
        "teens": 0,
        "children": n_children,
        "infants": 0,
        "dateOut": first.isoformat(),
        "dateIn": last.isoformat(),
        "daysTrip": trip_length,
        "nightsFrom": trip_length - 1,
        "nightsTo": trip_length + 1,
        "dayOfWeek": "",
        "isExactDate": "false",
        "outboundFromHour": "00:00",
        "outboundToHour": "23:59",
        "inboundFromHour": "00:00",
        "inboundToHour": "23:59",
        "priceValueTo": "",
        "currency": currency,
    }

    return f"{FARE_FINDER_URL}?{urlencode(params)}"
