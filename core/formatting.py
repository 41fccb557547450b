"""Formatting helpers for StatementDesk messages and figures."""

from __future__ import annotations

from analytics.dates import UNKNOWN_MONTH_KEY, format_year_month
from core.models import ProductTrend

__all__ = [
    "format_currency",
    "format_month_key",
    "format_overwrite_prompt",
    "format_price_change",
]


def format_currency(value: float) -> str:
    return f"¥{value:,.2f}"


def format_month_key(month_key: str) -> str:
    """Display label for a ``YYYY-MM`` analytics key."""

    if month_key == UNKNOWN_MONTH_KEY:
        return "未知"
    return format_year_month(month_key)


def format_overwrite_prompt(customer: str, month: str) -> str:
    return f"对账单已存在，是否覆盖？\n\n客户: {customer}\n月份: {month}"


def format_price_change(trend: ProductTrend) -> str:
    """Describe the latest average price against the first point of the timeline."""

    first = trend.first
    if first is None or len(trend.timeline) < 2:
        return "暂无变化"

    change = trend.change
    if trend.direction == "flat":
        return "持平"

    base = first["average_price"]
    arrow = "↑" if change > 0 else "↓"
    if base <= 0:
        return f"{arrow} {format_currency(abs(change))}"
    return f"{arrow} {format_currency(abs(change))} ({abs(change) / base * 100:.1f}%)"
