"""Customer → month bucket index used by the statement preview."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from analytics.dates import month_bucket_label
from core.models import Record

__all__ = ["CustomerIndex", "build_customer_index"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CustomerIndex:
    """Immutable snapshot of one scan, rebuilt wholesale on every new scan.

    ``buckets`` maps customer → bucket label → records in scan order.
    ``customers`` lists customer names by last activity, most recent first.
    """

    buckets: Mapping[str, Mapping[str, tuple[Record, ...]]]
    customer_types: Mapping[str, str]
    last_activity: Mapping[str, str]
    customers: tuple[str, ...]
    records: tuple[Record, ...]

    def __len__(self) -> int:
        return len(self.customers)

    def __contains__(self, customer: object) -> bool:
        return customer in self.buckets

    def bucket(self, customer: str | None, month: str | None) -> tuple[Record, ...]:
        if customer is None or month is None:
            return ()
        return self.buckets.get(customer, {}).get(month, ())

    def record_count(self) -> int:
        return sum(len(items) for months in self.buckets.values() for items in months.values())

    @classmethod
    def empty(cls) -> "CustomerIndex":
        return build_customer_index(())


def build_customer_index(records: Iterable[Record]) -> CustomerIndex:
    """Partition ``records`` by customer and display month bucket.

    Records without a customer are dropped. The customer type kept is the first
    one seen; the last-activity date is the lexicographically greatest raw date
    string, which matches calendar order only for same-format dates.
    """

    snapshot = tuple(records)
    grouped: dict[str, dict[str, list[Record]]] = {}
    customer_types: dict[str, str] = {}
    last_activity: dict[str, str] = {}
    dropped = 0

    for record in snapshot:
        customer = record.customer
        if not customer:
            dropped += 1
            continue

        previous = last_activity.get(customer)
        if previous is None or record.date > previous:
            last_activity[customer] = record.date
        customer_types.setdefault(customer, record.customer_type)

        label = month_bucket_label(record.date)
        grouped.setdefault(customer, {}).setdefault(label, []).append(record)

    # dicts keep first-encounter order, and sorted() is stable, so ties keep it too
    ordered = tuple(sorted(grouped, key=lambda name: last_activity[name], reverse=True))

    buckets = MappingProxyType(
        {
            customer: MappingProxyType({label: tuple(items) for label, items in months.items()})
            for customer, months in grouped.items()
        }
    )

    if dropped:
        logger.info("Skipped %d records without a customer", dropped)
    logger.debug("Indexed %d records for %d customers", len(snapshot) - dropped, len(ordered))

    return CustomerIndex(
        buckets=buckets,
        customer_types=MappingProxyType(customer_types),
        last_activity=MappingProxyType(last_activity),
        customers=ordered,
        records=snapshot,
    )
