"""User-facing activity log fed by the session and the scan service events."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal, Mapping

from core.models import FileDiagnostic, ScanReport

__all__ = ["LogLevel", "LogEntry", "ActivityLog", "diagnostic_file_name"]

logger = logging.getLogger(__name__)

LogLevel = Literal["info", "success", "warning", "error"]

_PYTHON_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
_PATH_SEPARATORS = re.compile(r"[/\\]")


@dataclass(frozen=True, slots=True)
class LogEntry:
    message: str
    level: LogLevel
    timestamp: str


def _local_time() -> str:
    return datetime.now().strftime("%H:%M:%S")


def diagnostic_file_name(path: str) -> str:
    """Last path component, splitting on both POSIX and Windows separators."""

    return _PATH_SEPARATORS.split(path)[-1]


class ActivityLog:
    """Append-only sequence of log entries in delivery order."""

    def __init__(self, clock: Callable[[], str] | None = None) -> None:
        self._entries: list[LogEntry] = []
        self._clock = clock or _local_time

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def latest(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    @property
    def needs_attention(self) -> bool:
        latest = self.latest
        return latest is not None and latest.level in ("warning", "error")

    def add(self, message: str, level: LogLevel = "info") -> LogEntry:
        entry = LogEntry(message=message, level=level, timestamp=self._clock())
        self._entries.append(entry)
        logger.log(_PYTHON_LEVELS.get(level, logging.INFO), message)
        return entry

    def on_event(self, payload: str | Mapping[str, Any]) -> LogEntry:
        """Handle one event from the external log stream."""

        if isinstance(payload, Mapping):
            message = str(payload.get("message", ""))
        else:
            message = str(payload)
        return self.add(message, "info")

    def _add_diagnostics(self, diagnostics: tuple[FileDiagnostic, ...], level: LogLevel) -> None:
        for item in diagnostics:
            self.add(f"{diagnostic_file_name(item.file)}: {item.error}", level)

    def record_scan(self, report: ScanReport) -> None:
        """Surface a scan reply's outcome and per-file diagnostics."""

        if report.success:
            self.add(f"数据验证通过: 找到 {report.total_files} 个文件", "success")
        else:
            self.add(f"数据验证发现问题: {report.message}", "error")
            self._add_diagnostics(report.errors, "error")

        if report.warnings:
            self.add(f"注意: 发现 {len(report.warnings)} 个文件存在警告", "warning")
            self._add_diagnostics(report.warnings, "warning")

    def clear(self) -> None:
        self._entries.clear()
