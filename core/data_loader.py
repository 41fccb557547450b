"""Conversion of scan-service payloads into records and dataframes."""

from __future__ import annotations

from dataclasses import asdict, fields
from functools import lru_cache
from typing import Any, Final, Iterable, Mapping

import pandas as pd

from core.models import FileDiagnostic, Record, ScanReport

__all__ = [
    "RECORD_COLUMNS",
    "record_from_mapping",
    "records_from_items",
    "parse_scan_report",
    "build_record_frame",
]


_CACHE_SIZE: Final[int] = 8
_NUMERIC_FIELDS: Final[frozenset[str]] = frozenset({"quantity", "unit_price", "amount"})
_DEFAULT_CUSTOMER_TYPE: Final[str] = "默认"

RECORD_COLUMNS: Final[tuple[str, ...]] = tuple(f.name for f in fields(Record))


def _coerce_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def record_from_mapping(item: Mapping[str, Any]) -> Record:
    """Build a :class:`Record` from one ``items`` entry of a scan reply."""

    values: dict[str, Any] = {}
    for name in RECORD_COLUMNS:
        raw = item.get(name)
        if name in _NUMERIC_FIELDS:
            values[name] = _coerce_float(raw)
        else:
            values[name] = _coerce_str(raw)

    if not values["customer_type"]:
        values["customer_type"] = _DEFAULT_CUSTOMER_TYPE
    return Record(**values)


def records_from_items(items: Iterable[Mapping[str, Any] | Record]) -> tuple[Record, ...]:
    return tuple(item if isinstance(item, Record) else record_from_mapping(item) for item in items)


def _diagnostics(entries: Iterable[Mapping[str, Any]] | None) -> tuple[FileDiagnostic, ...]:
    if not entries:
        return ()
    return tuple(
        FileDiagnostic(file=_coerce_str(entry.get("file")), error=_coerce_str(entry.get("error")))
        for entry in entries
    )


def parse_scan_report(payload: Mapping[str, Any]) -> ScanReport:
    """Return a :class:`ScanReport` for the raw reply of ``scan_and_validate``.

    Per-file errors and warnings are kept as diagnostics; they never make the
    conversion itself fail.
    """

    errors = _diagnostics(payload.get("errors"))
    warnings = _diagnostics(payload.get("warnings"))
    total_files = int(_coerce_float(payload.get("total_files")))

    raw_valid = payload.get("valid_files")
    if raw_valid is None:
        valid_files = max(total_files - len(errors) - len(warnings), 0)
    else:
        valid_files = int(_coerce_float(raw_valid))

    return ScanReport(
        success=bool(payload.get("success", False)),
        message=_coerce_str(payload.get("message")),
        total_files=total_files,
        valid_files=valid_files,
        errors=errors,
        warnings=warnings,
        items=records_from_items(payload.get("items") or ()),
    )


@lru_cache(maxsize=_CACHE_SIZE)
def build_record_frame(records: tuple[Record, ...]) -> pd.DataFrame:
    """Return the records as a dataframe, one row per record in input order.

    Results are cached per snapshot so that switching the analysis scope back
    and forth does not rebuild the frame.
    """

    if not records:
        return pd.DataFrame(columns=list(RECORD_COLUMNS))

    df = pd.DataFrame([asdict(record) for record in records], columns=list(RECORD_COLUMNS))
    for column in _NUMERIC_FIELDS:
        df[column] = df[column].astype(float)
    return df
