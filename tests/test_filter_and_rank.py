# tests/test_filter_and_rank.py
from decimal import Decimal

from filter_and_rank import format_summary, rank_by_total, top_n


def _trip(frm, to, depart, total):
    total = Decimal(total)
    return {
        "from": frm, "to": to, "depart": depart, "return": depart,
        "price_to": total - 10, "price_back": Decimal(10), "total": total,
    }


def test_rank_by_total_sorts_ascending():
    trips = [_trip("WAW", "BCN", "2024-06-01", "150"), _trip("WAW", "BCN", "2024-06-02", "90"),
             _trip("KRK", "STN", "2024-06-01", "120")]
    result = rank_by_total(trips)
    totals = [t["total"] for t in result]
    assert totals == sorted(totals)
    assert totals[0] == Decimal("90")


def test_rank_by_total_is_stable():
    a = _trip("WAW", "BCN", "2024-06-01", "100")
    b = _trip("KRK", "STN", "2024-06-01", "100")
    c = _trip("WAW", "BCN", "2024-06-03", "50")
    assert rank_by_total([a, b, c]) == [c, a, b]


def test_rank_does_not_mutate_input():
    trips = [_trip("WAW", "BCN", "2024-06-01", "150"), _trip("WAW", "BCN", "2024-06-02", "90")]
    original = list(trips)
    rank_by_total(trips)
    assert trips == original


def test_top_n_takes_cheapest_three():
    trips = [_trip("WAW", "BCN", f"2024-06-0{d}", str(200 - d * 10)) for d in range(1, 6)]
    best = top_n(trips)
    assert [t["total"] for t in best] == [Decimal(150), Decimal(160), Decimal(170)]
    assert len(trips) == 5


def test_rank_empty_list():
    assert rank_by_total([]) == []
    assert top_n([]) == []


def test_format_summary_lists_cheapest():
    trips = [_trip("WAW", "BCN", "2024-06-01", "110"), _trip("KRK", "STN", "2024-06-02", "75.5")]
    text = format_summary(trips, currency="EUR")
    assert text.startswith("Top 2 cheapest round trips:")
    assert "75.50 EUR" in text
    assert text.index("KRK") < text.index("WAW")


def test_format_summary_empty():
    assert format_summary([]) == "No priced round trips found."
