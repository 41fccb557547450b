"""Customer list filtering and month ordering for the preview pane."""

from __future__ import annotations

from typing import Final

from analytics.customers import CustomerIndex
from analytics.dates import bucket_sort_key

__all__ = [
    "ALL_TYPES",
    "filtered_customers",
    "customer_months",
    "default_month",
    "customer_types",
]

ALL_TYPES: Final[str] = "all"


def filtered_customers(
    index: CustomerIndex,
    type_filter: str = ALL_TYPES,
    search_term: str = "",
) -> list[str]:
    """Return the visible customers, keeping the index's recency order."""

    customers = list(index.customers)
    if type_filter != ALL_TYPES:
        customers = [name for name in customers if index.customer_types.get(name) == type_filter]

    if search_term:
        needle = search_term.lower()
        customers = [name for name in customers if needle in name.lower()]

    return customers


def customer_months(index: CustomerIndex, customer: str | None) -> list[str]:
    """Return a customer's bucket labels, newest first; sentinels sort last."""

    if customer is None or customer not in index.buckets:
        return []
    return sorted(index.buckets[customer], key=bucket_sort_key, reverse=True)


def default_month(index: CustomerIndex, customer: str | None) -> str | None:
    months = customer_months(index, customer)
    return months[0] if months else None


def customer_types(index: CustomerIndex) -> list[str]:
    """Distinct first-seen customer types, in customer display order."""

    seen: dict[str, None] = {}
    for name in index.customers:
        seen.setdefault(index.customer_types[name], None)
    return list(seen)
