"""Analytics helpers shared across StatementDesk services."""

from analytics.customers import CustomerIndex, build_customer_index
from analytics.dates import (
    MALFORMED_DATE_LABEL,
    OTHER_DATE_LABEL,
    UNKNOWN_LABEL,
    UNKNOWN_MONTH_KEY,
    bucket_sort_key,
    format_year_month,
    month_bucket_label,
    normalize_month_key,
)
from analytics.ranking import build_customer_ranking, build_product_ranking
from analytics.selection import ALL_TYPES, customer_months, customer_types, default_month, filtered_customers
from analytics.summary import build_product_summary, summarize
from analytics.trends import attach_month_keys, build_monthly_trend, build_price_trends, product_key

__all__ = [
    "CustomerIndex",
    "build_customer_index",
    "MALFORMED_DATE_LABEL",
    "OTHER_DATE_LABEL",
    "UNKNOWN_LABEL",
    "UNKNOWN_MONTH_KEY",
    "bucket_sort_key",
    "format_year_month",
    "month_bucket_label",
    "normalize_month_key",
    "build_customer_ranking",
    "build_product_ranking",
    "ALL_TYPES",
    "customer_months",
    "customer_types",
    "default_month",
    "filtered_customers",
    "build_product_summary",
    "summarize",
    "attach_month_keys",
    "build_monthly_trend",
    "build_price_trends",
    "product_key",
]
