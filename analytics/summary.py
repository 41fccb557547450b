"""Totals for the records of a single statement bucket."""

from __future__ import annotations

from typing import Iterable, Sequence

import pandas as pd

from core.data_loader import build_record_frame
from core.models import BucketSummary, ProductSummaryRow, Record

__all__ = ["summarize", "build_product_summary"]


def summarize(records: Iterable[Record]) -> BucketSummary:
    """Sum quantity and amount at full precision; rounding is a display concern."""

    quantity = 0.0
    amount = 0.0
    for record in records:
        quantity += record.quantity
        amount += record.amount
    return {"quantity": quantity, "amount": amount}


def _join_customers(names: pd.Series) -> str:
    unique = [name for name in dict.fromkeys(names) if name]
    return ", ".join(unique)


def build_product_summary(records: Sequence[Record]) -> list[ProductSummaryRow]:
    """Group a bucket by product, spec and unit, largest amount first."""

    if not records:
        return []

    frame = build_record_frame(tuple(records))
    grouped = (
        frame.groupby(["product_name", "spec", "unit"], sort=False)
        .agg(
            quantity=("quantity", "sum"),
            amount=("amount", "sum"),
            customers=("customer", _join_customers),
        )
        .reset_index()
        .sort_values("amount", ascending=False, kind="stable")
    )

    rows: list[ProductSummaryRow] = []
    for row in grouped.to_dict(orient="records"):
        quantity = float(row["quantity"])
        amount = float(row["amount"])
        average_price = round(amount / quantity, 2) if quantity > 0 else 0.0
        rows.append(
            {
                "product_name": str(row["product_name"]),
                "spec": str(row["spec"]),
                "unit": str(row["unit"]),
                "quantity": quantity,
                "amount": amount,
                "average_price": average_price,
                "customers": str(row["customers"]),
            }
        )
    return rows
