"""Shared data model definitions for StatementDesk."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypedDict

ScopeKind = Literal["customer", "product"]
TrendDirection = Literal["up", "down", "flat"]

ALL_SCOPE = "all"


@dataclass(frozen=True, slots=True)
class Record:
    """One parsed delivery/sales line item as produced by the scan service."""

    customer: str
    date: str
    product_name: str = ""
    spec: str = ""
    unit: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0
    amount: float = 0.0
    customer_type: str = "默认"
    delivery_order_no: str = ""
    order_no: str = ""
    source_file: str = ""


@dataclass(frozen=True, slots=True)
class FileDiagnostic:
    file: str
    error: str


@dataclass(frozen=True, slots=True)
class ScanReport:
    success: bool
    message: str
    total_files: int
    valid_files: int
    errors: tuple[FileDiagnostic, ...] = ()
    warnings: tuple[FileDiagnostic, ...] = ()
    items: tuple[Record, ...] = ()


class BucketSummary(TypedDict):
    quantity: float
    amount: float


class ProductSummaryRow(TypedDict):
    product_name: str
    spec: str
    unit: str
    quantity: float
    amount: float
    average_price: float
    customers: str


class TrendPoint(TypedDict):
    month: str
    amount: float


class RankingRow(TypedDict, total=False):
    name: str
    amount: float
    quantity: float


class PricePoint(TypedDict):
    month: str
    average_price: float


@dataclass(frozen=True, slots=True)
class ProductTrend:
    """Average unit price per month for one product/spec pair."""

    key: str
    product_name: str
    spec: str
    timeline: tuple[PricePoint, ...]

    @property
    def first(self) -> PricePoint | None:
        return self.timeline[0] if self.timeline else None

    @property
    def latest(self) -> PricePoint | None:
        return self.timeline[-1] if self.timeline else None

    @property
    def change(self) -> float:
        if not self.timeline:
            return 0.0
        return self.timeline[-1]["average_price"] - self.timeline[0]["average_price"]

    @property
    def direction(self) -> TrendDirection:
        change = self.change
        if change > 0:
            return "up"
        if change < 0:
            return "down"
        return "flat"


@dataclass(frozen=True, slots=True)
class AnalyticsResult:
    scope: str
    total_amount: float
    total_quantity: float
    total_count: int
    monthly_trend: tuple[TrendPoint, ...]
    ranking_kind: ScopeKind
    ranking: tuple[RankingRow, ...]
    product_trends: tuple[ProductTrend, ...] = field(default=())

    @property
    def is_global(self) -> bool:
        return self.scope == ALL_SCOPE


__all__ = [
    "ALL_SCOPE",
    "ScopeKind",
    "TrendDirection",
    "Record",
    "FileDiagnostic",
    "ScanReport",
    "BucketSummary",
    "ProductSummaryRow",
    "TrendPoint",
    "RankingRow",
    "PricePoint",
    "ProductTrend",
    "AnalyticsResult",
]
