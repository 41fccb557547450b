"""Shared fixtures for the StatementDesk test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import get_settings
from config.store import AppConfig
from core.models import Record


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_record(customer: str, date: str, **overrides: Any) -> Record:
    values: dict[str, Any] = {
        "customer": customer,
        "date": date,
        "product_name": "Widget",
        "spec": "A",
        "unit": "pcs",
        "quantity": 1.0,
        "unit_price": 10.0,
        "amount": 10.0,
        "customer_type": "月结客户",
    }
    values.update(overrides)
    return Record(**values)


@pytest.fixture()
def sample_records() -> list[Record]:
    return [
        make_record("A", "2024-03-05", quantity=2.0, unit_price=50.0, amount=100.0),
        make_record("A", "2024-03-20", quantity=1.0, unit_price=50.0, amount=50.0),
        make_record("B", "2024-01-10", quantity=4.0, unit_price=50.0, amount=200.0, customer_type="现金客户"),
    ]


class FakeRenderer:
    """Render service double that replays scripted outcomes and records calls."""

    def __init__(self, outcomes: Sequence[Mapping[str, Any] | Exception] | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.calls: list[dict[str, Any]] = []

    def generate_single_statement(self, config, items, customer, month, overwrite):
        self.calls.append(
            {"customer": customer, "month": month, "overwrite": overwrite, "count": len(items)}
        )
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = {"success": True, "message": f"已生成: out/{customer}/{month}.xlsx"}
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeScanner:
    def __init__(self, payload: Mapping[str, Any] | Exception) -> None:
        self.payload = payload
        self.calls = 0

    def scan_and_validate(self, config):
        self.calls += 1
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class MemoryStore:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.saved: list[AppConfig] = []

    def load_config(self) -> AppConfig:
        return self.config

    def save_config(self, config: AppConfig) -> None:
        self.saved.append(config)
        self.config = config


@pytest.fixture()
def app_config(tmp_path) -> AppConfig:
    return AppConfig(raw_data_path=str(tmp_path / "raw"), output_path=str(tmp_path / "out"))


@pytest.fixture()
def record_factory():
    return make_record


@pytest.fixture()
def renderer_factory():
    return FakeRenderer


@pytest.fixture()
def scanner_factory():
    return FakeScanner


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()
