# filter_and_rank.py
import pandas as pd

from config import TOP_N


def rank_by_total(itineraries: list[dict]) -> list[dict]:
    """Sort itineraries by total price, lowest first. Equal totals keep their order."""
    return sorted(itineraries, key=lambda t: t["total"])


def top_n(itineraries: list[dict], n: int = TOP_N) -> list[dict]:
    return rank_by_total(itineraries)[:n]


def format_summary(itineraries: list[dict], n: int = TOP_N, currency: str = "EUR") -> str:
    """Human-readable table of the n cheapest round trips."""
    best = top_n(itineraries, n)
    if not best:
        return "No priced round trips found."

    df = pd.DataFrame(best)
    df.insert(0, "rank", range(1, len(df) + 1))
    for col in ("price_to", "price_back", "total"):
        df[col] = df[col].map(lambda v: f"{v:.2f} {currency}")
    df = df.rename(columns={
        "from": "From",
        "to": "To",
        "depart": "Depart",
        "return": "Return",
        "price_to": "Price To",
        "price_back": "Price Back",
        "total": "Total",
    })
    return f"Top {len(best)} cheapest round trips:\n" + df.to_string(index=False)
