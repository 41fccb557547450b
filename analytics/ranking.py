"""Top-N contribution rankings by customer or by product."""

from __future__ import annotations

import pandas as pd

from config.settings import DEFAULT_RANKING_LIMIT
from core.models import RankingRow

__all__ = ["build_customer_ranking", "build_product_ranking"]


def build_customer_ranking(items: pd.DataFrame, limit: int = DEFAULT_RANKING_LIMIT) -> list[RankingRow]:
    """Customers by total amount, largest first; ties keep encounter order."""

    if items.empty or limit <= 0:
        return []

    totals = (
        items.groupby("customer", sort=False)["amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
        .head(limit)
    )
    return [{"name": str(name), "amount": float(amount)} for name, amount in totals.items()]


def build_product_ranking(items: pd.DataFrame, limit: int = DEFAULT_RANKING_LIMIT) -> list[RankingRow]:
    """Products by total amount, with their total quantity."""

    if items.empty or limit <= 0:
        return []

    totals = (
        items.groupby("product_name", sort=False)
        .agg(amount=("amount", "sum"), quantity=("quantity", "sum"))
        .sort_values("amount", ascending=False, kind="stable")
        .head(limit)
    )

    rows: list[RankingRow] = []
    for name, row in totals.iterrows():
        rows.append({"name": str(name), "amount": float(row["amount"]), "quantity": float(row["quantity"])})
    return rows
