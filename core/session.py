"""Session controller tying the index, selection, analytics and generation together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from analytics.customers import CustomerIndex, build_customer_index
from analytics.selection import ALL_TYPES, customer_months, default_month, filtered_customers
from analytics.summary import summarize
from config.store import AppConfig, ConfigStore, ConfigStoreError
from core.activity import ActivityLog
from core.analysis_service import prepare_analysis
from core.data_loader import parse_scan_report
from core.errors import ConfigurationError
from core.models import ALL_SCOPE, AnalyticsResult, BucketSummary, Record, ScanReport
from core.ports import PathOpener, ScanService, StatementRenderer
from core.workflow import BatchResult, ConfirmCallback, GenerationState, StatementGenerator, generate_all_statements

__all__ = ["SessionState", "DashboardSession"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionState:
    """What the user currently has selected."""

    customer: str | None = None
    month: str | None = None
    scope: str = ALL_SCOPE
    type_filter: str = ALL_TYPES
    search_term: str = ""


class DashboardSession:
    """Owns the current scan snapshot and the user's selection.

    The index is replaced wholesale on each scan. Analytics are memoized per
    (snapshot, scope) and recomputed when either changes.
    """

    def __init__(
        self,
        *,
        scanner: ScanService,
        renderer: StatementRenderer,
        store: ConfigStore,
        opener: PathOpener | None = None,
        log: ActivityLog | None = None,
    ) -> None:
        self.scanner = scanner
        self.store = store
        self.opener = opener
        self.log = log or ActivityLog()
        self.generator = StatementGenerator(renderer, self.log)
        self.config = AppConfig()
        self.index = CustomerIndex.empty()
        self.state = SessionState()
        self.last_scan: ScanReport | None = None
        self.scanning = False
        self._analysis_key: tuple[int, str] | None = None
        self._analysis: AnalyticsResult | None = None

    # -- configuration -------------------------------------------------

    def load_config(self) -> AppConfig:
        try:
            self.config = self.store.load_config()
        except Exception as exc:  # store boundary: keep running on defaults
            self.log.add(f"加载配置失败: {exc}", "error")
            self.config = AppConfig()

        if self.config.raw_data_path:
            self.scan()
        return self.config

    def save_config(self, config: AppConfig) -> bool:
        previous = self.config
        self.config = config
        try:
            self.store.save_config(config)
        except ConfigStoreError as exc:
            self.log.add(f"保存配置失败: {exc}", "error")
            return False

        if config.raw_data_path != previous.raw_data_path:
            self.scan()
        return True

    # -- scanning -------------------------------------------------------

    def scan(self) -> ScanReport | None:
        """Ask the scan service for records and rebuild the index from them."""

        self.scanning = True
        self.log.add("正在自动扫描并验证原始数据...", "info")
        try:
            payload = self.scanner.scan_and_validate(self.config)
            report = parse_scan_report(payload)
        except Exception as exc:  # service boundary
            self.log.add(f"扫描失败: {exc}", "error")
            return None
        finally:
            self.scanning = False

        self.log.record_scan(report)
        self.last_scan = report
        self.load_records(report.items)
        return report

    def load_records(self, records: Iterable[Record]) -> CustomerIndex:
        self.index = build_customer_index(records)
        self._analysis_key = None
        self._analysis = None

        customer = self.state.customer
        if customer is not None and customer not in self.index:
            customer = None
        month = self.state.month
        if customer is None or month not in customer_months(self.index, customer):
            month = default_month(self.index, customer)

        scope = self.state.scope
        if scope != ALL_SCOPE and scope not in self.index:
            scope = ALL_SCOPE

        self.state = replace(self.state, customer=customer, month=month, scope=scope)
        return self.index

    # -- selection -----------------------------------------------------

    def visible_customers(self) -> list[str]:
        return filtered_customers(self.index, self.state.type_filter, self.state.search_term)

    def months(self) -> list[str]:
        return customer_months(self.index, self.state.customer)

    def select_customer(self, customer: str | None) -> SessionState:
        """Select a customer and jump to their most recent month."""

        self.state = replace(self.state, customer=customer, month=default_month(self.index, customer))
        return self.state

    def select_month(self, month: str | None) -> SessionState:
        if month is not None and month not in self.months():
            raise KeyError(month)
        self.state = replace(self.state, month=month)
        return self.state

    def set_type_filter(self, type_filter: str) -> SessionState:
        self.state = replace(self.state, type_filter=type_filter or ALL_TYPES)
        return self.state

    def set_search(self, search_term: str) -> SessionState:
        self.state = replace(self.state, search_term=search_term)
        return self.state

    def current_items(self) -> tuple[Record, ...]:
        return self.index.bucket(self.state.customer, self.state.month)

    def current_summary(self) -> BucketSummary:
        return summarize(self.current_items())

    # -- analytics -----------------------------------------------------

    def set_scope(self, scope: str) -> SessionState:
        self.state = replace(self.state, scope=scope or ALL_SCOPE)
        return self.state

    def analytics(self) -> AnalyticsResult | None:
        key = (id(self.index), self.state.scope)
        if key != self._analysis_key:
            self._analysis = prepare_analysis(self.index.records, self.state.scope)
            self._analysis_key = key
        return self._analysis

    # -- generation ----------------------------------------------------

    @property
    def generating(self) -> bool:
        return self.generator.busy

    def generate_current(self, confirm: ConfirmCallback) -> GenerationState | None:
        """Generate the statement for the selected customer and month."""

        customer, month = self.state.customer, self.state.month
        if customer is None or month is None:
            return None
        return self.generator.run(self.config, self.current_items(), customer, month, confirm)

    def generate_all(self) -> BatchResult | None:
        """Render every bucket of the current snapshot, skipping existing files."""

        try:
            return generate_all_statements(self.config, self.index, self.generator.renderer, self.log)
        except ConfigurationError:
            return None

    # -- shell integration ---------------------------------------------

    def open_output_folder(self) -> bool:
        if not self.config.output_path:
            return False
        return self._open(self.config.output_path, "打开文件夹失败")

    def open_file(self, path: str | None) -> bool:
        if not path:
            return False
        self.log.add(f"尝试打开文件: {path}", "info")
        return self._open(path, "打开文件失败")

    def _open(self, path: str, failure_label: str) -> bool:
        if self.opener is None:
            logger.warning("No path opener configured; cannot open %s", path)
            return False
        try:
            self.opener.open_path(path)
        except Exception as exc:  # shell boundary: failures are only logged
            self.log.add(f"{failure_label}: {exc}", "error")
            return False
        return True
