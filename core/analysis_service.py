"""Core logic for assembling the business analysis view."""

from __future__ import annotations

import logging
from typing import Iterable

from analytics.ranking import build_customer_ranking, build_product_ranking
from analytics.trends import attach_month_keys, build_monthly_trend, build_price_trends
from config.settings import get_settings
from core.data_loader import build_record_frame
from core.models import ALL_SCOPE, AnalyticsResult, Record

__all__ = ["prepare_analysis"]

logger = logging.getLogger(__name__)


def prepare_analysis(
    records: Iterable[Record],
    scope: str = ALL_SCOPE,
    *,
    ranking_limit: int | None = None,
) -> AnalyticsResult | None:
    """Return analytics for ``scope`` ("all" or a customer name).

    Returns ``None`` when the scope has no records. For the global scope the
    ranking lists customers; for a single customer it lists products and the
    result also carries per-product price trends.
    """

    frame = build_record_frame(tuple(records))
    if frame.empty:
        return None

    items = frame if scope == ALL_SCOPE else frame[frame["customer"] == scope]
    if items.empty:
        logger.debug("No records for analysis scope %r", scope)
        return None

    limit = ranking_limit if ranking_limit is not None else get_settings().ranking_limit
    items = attach_month_keys(items)

    total_amount = float(items["amount"].sum())
    total_quantity = float(items["quantity"].sum())
    monthly_trend = build_monthly_trend(items)

    if scope == ALL_SCOPE:
        return AnalyticsResult(
            scope=scope,
            total_amount=total_amount,
            total_quantity=total_quantity,
            total_count=int(len(items)),
            monthly_trend=tuple(monthly_trend),
            ranking_kind="customer",
            ranking=tuple(build_customer_ranking(items, limit)),
        )

    return AnalyticsResult(
        scope=scope,
        total_amount=total_amount,
        total_quantity=total_quantity,
        total_count=int(len(items)),
        monthly_trend=tuple(monthly_trend),
        ranking_kind="product",
        ranking=tuple(build_product_ranking(items, limit)),
        product_trends=tuple(build_price_trends(items)),
    )
