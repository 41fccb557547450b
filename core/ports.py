"""Interfaces of the external services StatementDesk talks to."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from config.store import AppConfig
from core.models import Record


class ScanService(Protocol):
    """Discovers and parses the raw delivery files under ``raw_data_path``."""

    def scan_and_validate(self, config: AppConfig) -> Mapping[str, Any]:
        """
        Return the raw scan reply.

        Keys: ``success``, ``total_files``, ``message``, ``errors`` and
        ``warnings`` (lists of ``{file, error}``) and ``items`` (record mappings).
        Per-file problems are reported in the reply, not raised.
        """


class StatementRenderer(Protocol):
    """Writes one customer/month statement file under ``output_path``."""

    def generate_single_statement(
        self,
        config: AppConfig,
        items: Sequence[Record],
        customer: str,
        month: str,
        overwrite: bool,
    ) -> Mapping[str, Any]:
        """
        Render a statement and return ``{success, message}``.

        When the file exists and ``overwrite`` is false, raise an error whose
        text contains ``FILE_EXISTS``.
        """


class PathOpener(Protocol):
    def open_path(self, path: str) -> None:
        """Open a file or folder in the OS shell."""


__all__ = ["ScanService", "StatementRenderer", "PathOpener"]
