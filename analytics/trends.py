"""Monthly revenue trend and per-product price trend helpers."""

from __future__ import annotations

import pandas as pd

from analytics.dates import normalize_month_key
from core.models import PricePoint, ProductTrend, TrendPoint

__all__ = [
    "PRODUCT_KEY_SEPARATOR",
    "attach_month_keys",
    "product_key",
    "build_monthly_trend",
    "build_price_trends",
]

PRODUCT_KEY_SEPARATOR = "::"


def product_key(product_name: str, spec: str) -> str:
    return f"{product_name}{PRODUCT_KEY_SEPARATOR}{spec}"


def attach_month_keys(items: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``items`` with a ``month`` column of ``YYYY-MM`` keys."""

    enriched = items.copy()
    enriched["month"] = enriched["date"].map(normalize_month_key)
    return enriched


def build_monthly_trend(items: pd.DataFrame) -> list[TrendPoint]:
    """Sum amount per month key, ascending by key.

    ``YYYY-MM`` strings sort chronologically; ``"Unknown"`` sorts after them.
    """

    if items.empty:
        return []

    if "month" not in items.columns:
        items = attach_month_keys(items)

    totals = items.groupby("month", sort=False)["amount"].sum()
    totals = totals.sort_index(kind="stable")
    return [{"month": str(month), "amount": float(amount)} for month, amount in totals.items()]


def build_price_trends(items: pd.DataFrame) -> list[ProductTrend]:
    """Average unit price per month for each product/spec pair.

    The average is the plain mean of the unit prices on the individual line
    items, not a quantity-weighted price.
    """

    if items.empty:
        return []

    if "month" not in items.columns:
        items = attach_month_keys(items)

    averages = (
        items.groupby(["product_name", "spec", "month"], sort=False)["unit_price"]
        .agg(["sum", "count"])
        .reset_index()
    )
    averages["average_price"] = averages["sum"] / averages["count"]

    trends: list[ProductTrend] = []
    for (name, spec), group_df in averages.groupby(["product_name", "spec"], sort=False):
        timeline = group_df.sort_values("month", kind="stable")
        points: tuple[PricePoint, ...] = tuple(
            {"month": str(month), "average_price": float(price)}
            for month, price in zip(timeline["month"], timeline["average_price"])
        )
        trends.append(
            ProductTrend(
                key=product_key(str(name), str(spec)),
                product_name=str(name),
                spec=str(spec),
                timeline=points,
            )
        )

    trends.sort(key=lambda trend: (trend.product_name, trend.spec))
    return trends
