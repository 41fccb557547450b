import json
import logging

import pytest
import streamlit as st

from config.settings import DEFAULT_RANKING_LIMIT, configure_logging, get_settings
from config.store import AppConfig, ConfigStoreError, JsonConfigStore, load_config, save_config


def test_load_config_defaults_when_missing(tmp_path):
    config = load_config(tmp_path / "missing.json")

    assert config == AppConfig()
    assert config.output_path == "output"


def test_save_then_load_preserves_unicode(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = AppConfig(company_name="测试公司", output_path=str(tmp_path / "out"))

    save_config(config, path)

    raw = path.read_text(encoding="utf-8")
    assert "测试公司" in raw
    assert json.loads(raw)["company_name"] == "测试公司"
    assert load_config(path) == config


def test_corrupt_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config(path) == AppConfig()


def test_save_config_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(ConfigStoreError):
        save_config(AppConfig(), blocker / "config.json")


def test_json_store_round_trip(tmp_path):
    store = JsonConfigStore(tmp_path / "config.json")
    store.save_config(AppConfig(fax="123"))

    assert store.load_config().fax == "123"


def test_settings_from_env_and_secrets(monkeypatch, tmp_path):
    assert get_settings().ranking_limit == DEFAULT_RANKING_LIMIT

    get_settings.cache_clear()
    monkeypatch.setenv("STATEMENTDESK_RANKING_LIMIT", "5")
    assert get_settings().ranking_limit == 5

    get_settings.cache_clear()
    monkeypatch.setattr(st, "secrets", {"statementdesk": {"config_dir": str(tmp_path)}}, raising=False)
    settings = get_settings()
    assert settings.config_path == tmp_path / "config.json"
    assert settings.ranking_limit == 5


def test_configure_logging_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG

        configure_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
