"""Core domain package for the StatementDesk application."""

from .data_loader import build_record_frame, parse_scan_report, record_from_mapping, records_from_items
from .errors import (
    ConfigurationError,
    GenerationBusyError,
    NoDataError,
    StatementConflictError,
    StatementDeskError,
    StatementRenderError,
    classify_render_failure,
)
from .models import (
    ALL_SCOPE,
    AnalyticsResult,
    BucketSummary,
    FileDiagnostic,
    PricePoint,
    ProductSummaryRow,
    ProductTrend,
    RankingRow,
    Record,
    ScanReport,
    TrendPoint,
)

__all__ = [
    "build_record_frame",
    "parse_scan_report",
    "record_from_mapping",
    "records_from_items",
    "ConfigurationError",
    "GenerationBusyError",
    "NoDataError",
    "StatementConflictError",
    "StatementDeskError",
    "StatementRenderError",
    "classify_render_failure",
    "ALL_SCOPE",
    "AnalyticsResult",
    "BucketSummary",
    "FileDiagnostic",
    "PricePoint",
    "ProductSummaryRow",
    "ProductTrend",
    "RankingRow",
    "Record",
    "ScanReport",
    "TrendPoint",
]
