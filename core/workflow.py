"""Single-statement generation with overwrite confirmation, plus batch runs.

The single-statement flow is a small state machine::

    IDLE -> REQUESTING -> SUCCESS | CONFLICT | FAILED
    CONFLICT -> (confirmed) RETRYING -> SUCCESS | FAILED
    CONFLICT -> (declined)  CANCELLED

A conflict is detected once, on the first request. A failure while retrying is
terminal and never triggers another prompt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from analytics.customers import CustomerIndex
from analytics.selection import customer_months
from config.store import AppConfig
from core.activity import ActivityLog
from core.errors import (
    ConfigurationError,
    GenerationBusyError,
    NoDataError,
    StatementConflictError,
    StatementDeskError,
    classify_render_failure,
)
from core.formatting import format_overwrite_prompt
from core.models import Record
from core.ports import StatementRenderer

__all__ = [
    "GenerationPhase",
    "GenerationState",
    "BatchResult",
    "StatementGenerator",
    "begin",
    "resolve_reply",
    "resolve_confirmation",
    "generate_all_statements",
]

logger = logging.getLogger(__name__)

GENERATED_PREFIX = "已生成: "

ConfirmCallback = Callable[[str], bool]


class GenerationPhase(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCESS = "success"
    CONFLICT = "conflict"
    RETRYING = "retrying"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


_IN_FLIGHT = frozenset({GenerationPhase.REQUESTING, GenerationPhase.RETRYING})
_TERMINAL = frozenset({GenerationPhase.SUCCESS, GenerationPhase.FAILED, GenerationPhase.CANCELLED})


@dataclass(frozen=True, slots=True)
class GenerationState:
    phase: GenerationPhase = GenerationPhase.IDLE
    customer: str | None = None
    month: str | None = None
    file_path: str | None = None
    error: StatementDeskError | None = None

    @property
    def in_flight(self) -> bool:
        return self.phase in _IN_FLIGHT

    @property
    def finished(self) -> bool:
        return self.phase in _TERMINAL

    @property
    def overwrite(self) -> bool:
        return self.phase is GenerationPhase.RETRYING


def begin(customer: str, month: str) -> GenerationState:
    return GenerationState(phase=GenerationPhase.REQUESTING, customer=customer, month=month)


def _failed(state: GenerationState, error: StatementDeskError) -> GenerationState:
    return replace(state, phase=GenerationPhase.FAILED, error=error)


def resolve_reply(
    state: GenerationState,
    reply: Mapping[str, Any] | None = None,
    error: object | None = None,
) -> GenerationState:
    """Apply the render service's answer (a reply or a raised error) to ``state``."""

    if not state.in_flight:
        raise ValueError(f"no request in flight (phase={state.phase})")

    if error is None and reply is not None and reply.get("success"):
        message = str(reply.get("message", ""))
        file_path = message.replace(GENERATED_PREFIX, "", 1) if message.startswith(GENERATED_PREFIX) else message
        return replace(state, phase=GenerationPhase.SUCCESS, file_path=file_path, error=None)

    if error is None:
        error = (reply or {}).get("message") or "render service reported failure"

    failure = classify_render_failure(error)
    if isinstance(failure, StatementConflictError) and state.phase is GenerationPhase.REQUESTING:
        return replace(state, phase=GenerationPhase.CONFLICT, error=failure)
    return _failed(state, failure)


def resolve_confirmation(state: GenerationState, confirmed: bool) -> GenerationState:
    if state.phase is not GenerationPhase.CONFLICT:
        raise ValueError(f"nothing to confirm (phase={state.phase})")
    if confirmed:
        return replace(state, phase=GenerationPhase.RETRYING, error=None)
    return replace(state, phase=GenerationPhase.CANCELLED)


class StatementGenerator:
    """Drives one generation at a time against a :class:`StatementRenderer`."""

    def __init__(self, renderer: StatementRenderer, log: ActivityLog) -> None:
        self.renderer = renderer
        self.log = log
        self.state = GenerationState()

    @property
    def busy(self) -> bool:
        # the confirmation prompt counts as part of the running generation
        return self.state.phase is not GenerationPhase.IDLE and not self.state.finished

    def _request(self, config: AppConfig, items: Sequence[Record], state: GenerationState) -> GenerationState:
        self.state = state
        try:
            reply = self.renderer.generate_single_statement(
                config,
                list(items),
                state.customer or "",
                state.month or "",
                state.overwrite,
            )
        except Exception as exc:  # service boundary: every failure becomes a state
            next_state = resolve_reply(state, error=exc)
        else:
            next_state = resolve_reply(state, reply=reply)
        self.state = next_state
        return next_state

    def run(
        self,
        config: AppConfig,
        items: Sequence[Record],
        customer: str,
        month: str,
        confirm: ConfirmCallback,
    ) -> GenerationState:
        """Generate one statement, asking ``confirm`` before overwriting a file."""

        if self.busy:
            raise GenerationBusyError("a statement is already being generated")

        if not config.output_path:
            self.log.add("请先配置输出文件夹", "error")
            self.state = _failed(
                GenerationState(customer=customer, month=month),
                ConfigurationError("output path not set"),
            )
            return self.state

        if not items:
            self.log.add("当前选择无数据", "error")
            self.state = _failed(
                GenerationState(customer=customer, month=month),
                NoDataError("no records selected"),
            )
            return self.state

        self.log.add(f"开始生成对账单: {customer} {month}...", "info")
        try:
            return self._drive(config, items, customer, month, confirm)
        finally:
            if not self.state.finished:
                self.state = GenerationState()

    def _drive(
        self,
        config: AppConfig,
        items: Sequence[Record],
        customer: str,
        month: str,
        confirm: ConfirmCallback,
    ) -> GenerationState:
        state = self._request(config, items, begin(customer, month))

        if state.phase is GenerationPhase.CONFLICT:
            logger.info("Statement for %s %s already exists", customer, month)
            state = resolve_confirmation(state, bool(confirm(format_overwrite_prompt(customer, month))))
            self.state = state
            if state.phase is GenerationPhase.CANCELLED:
                self.log.add("已取消生成", "info")
                return state

            state = self._request(config, items, state)
            if state.phase is GenerationPhase.FAILED:
                self.log.add(f"覆盖生成失败: {state.error}", "error")
                return state

        if state.phase is GenerationPhase.SUCCESS:
            self.log.add(f"{GENERATED_PREFIX}{state.file_path}", "success")
        elif state.phase is GenerationPhase.FAILED:
            self.log.add(f"生成失败: {state.error}", "error")
        return state


@dataclass(frozen=True, slots=True)
class BatchResult:
    generated: int
    skipped: int
    failed: int
    output_path: str

    @property
    def success(self) -> bool:
        return self.failed == 0


def generate_all_statements(
    config: AppConfig,
    index: CustomerIndex,
    renderer: StatementRenderer,
    log: ActivityLog,
) -> BatchResult:
    """Render every customer/month bucket, skipping statements that already exist.

    Existing files are never overwritten and no confirmation is asked for.
    """

    if not config.output_path:
        log.add("请先配置输出文件夹", "error")
        raise ConfigurationError("output path not set")

    if not index.customers:
        log.add("未提取到任何数据", "error")
        return BatchResult(generated=0, skipped=0, failed=0, output_path=config.output_path)

    log.add("开始生成对账单...", "info")
    generated = skipped = failed = 0

    for customer in index.customers:
        for month in customer_months(index, customer):
            items = index.bucket(customer, month)
            try:
                reply = renderer.generate_single_statement(config, list(items), customer, month, False)
                if not reply.get("success"):
                    raise classify_render_failure(reply.get("message") or "render service reported failure")
            except Exception as exc:  # service boundary: keep going with the next bucket
                failure = classify_render_failure(exc)
                if isinstance(failure, StatementConflictError):
                    log.add(f"已存在，跳过: {customer} {month}", "info")
                    skipped += 1
                else:
                    log.add(f"生成失败: {customer} {month}: {failure}", "error")
                    failed += 1
                continue

            log.add(f"生成: {customer} {month}", "info")
            generated += 1

    log.add("所有对账单生成完成！", "success")
    log.add(f"新生成: {generated} 个对账单", "info")
    log.add(f"已跳过: {skipped} 个对账单", "info")
    return BatchResult(generated=generated, skipped=skipped, failed=failed, output_path=config.output_path)
