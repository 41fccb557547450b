"""Month bucketing for record date strings.

Two independent parsers live here. :func:`month_bucket_label` produces the
display bucket used by the statement preview (``"2024年3月"``), while
:func:`normalize_month_key` produces the ``YYYY-MM`` key the analytics engine
groups by. They intentionally disagree on sentinels and accepted formats.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final

__all__ = [
    "UNKNOWN_LABEL",
    "OTHER_DATE_LABEL",
    "MALFORMED_DATE_LABEL",
    "UNKNOWN_MONTH_KEY",
    "month_bucket_label",
    "normalize_month_key",
    "bucket_sort_key",
    "format_year_month",
]

UNKNOWN_LABEL: Final[str] = "未知"
OTHER_DATE_LABEL: Final[str] = "其他日期"
MALFORMED_DATE_LABEL: Final[str] = "日期格式错误"
UNKNOWN_MONTH_KEY: Final[str] = "Unknown"

_SEPARATORS = re.compile(r"[-/]")
_LEADING_INT = re.compile(r"^\s*(\d+)", re.ASCII)
_NUMERIC_DATE = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.]\d{1,2}", re.ASCII)
_CHINESE_DATE = re.compile(r"^(\d{4})年(\d{1,2})月", re.ASCII)
_BUCKET_LABEL = re.compile(r"(\d+)年(\d+)月", re.ASCII)
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$", re.ASCII)


def month_bucket_label(date_str: str | None) -> str:
    """Return the display month bucket for ``date_str``.

    ``"2024-03-05"`` and ``"2024/3/5"`` both map to ``"2024年3月"``. Strings
    without a ``-`` or ``/`` separator, or without a number after it, land in
    ``"其他日期"``. Input that cannot be split at all lands in ``"日期格式错误"``
    and a missing date is ``"未知"``.
    """

    if date_str is None:
        return UNKNOWN_LABEL
    if not isinstance(date_str, str):
        return MALFORMED_DATE_LABEL
    return _bucket_label(date_str)


@lru_cache(maxsize=4096)
def _bucket_label(date_str: str) -> str:
    parts = _SEPARATORS.split(date_str)
    if len(parts) < 2:
        return OTHER_DATE_LABEL
    month = _LEADING_INT.match(parts[1])
    if month is None:
        return OTHER_DATE_LABEL
    return f"{parts[0]}年{int(month.group(1))}月"


def normalize_month_key(date_str: str | None) -> str:
    """Return the zero-padded ``YYYY-MM`` analytics key, or ``"Unknown"``."""

    if not isinstance(date_str, str):
        return UNKNOWN_MONTH_KEY
    return _month_key(date_str)


@lru_cache(maxsize=4096)
def _month_key(date_str: str) -> str:
    match = _NUMERIC_DATE.match(date_str) or _CHINESE_DATE.match(date_str)
    if match is None:
        return UNKNOWN_MONTH_KEY
    return f"{match.group(1)}-{match.group(2).zfill(2)}"


def bucket_sort_key(label: str) -> int:
    """Numeric ``year * 100 + month`` for a bucket label; 0 for sentinels."""

    match = _BUCKET_LABEL.search(label)
    if match is None:
        return 0
    return int(match.group(1)) * 100 + int(match.group(2))


def format_year_month(year_month: str) -> str:
    """Render ``"2024-01"`` as ``"2024年1月"``; other input is returned as-is."""

    match = _YEAR_MONTH.match(year_month)
    if match is None:
        return year_month
    return f"{int(match.group(1))}年{int(match.group(2))}月"
