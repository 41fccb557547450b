"""Centralised configuration handling for StatementDesk."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "statementdesk"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_RANKING_LIMIT = 10
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_SECRETS_SECTION = "statementdesk"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail outside streamlit
        return None
    return None


class Settings(BaseSettings):
    """Process settings sourced from env vars and Streamlit secrets."""

    config_dir: Path = DEFAULT_CONFIG_DIR
    config_file: str = DEFAULT_CONFIG_FILE
    log_level: str = "INFO"
    ranking_limit: int = DEFAULT_RANKING_LIMIT

    model_config = SettingsConfigDict(env_prefix="STATEMENTDESK_", extra="ignore")

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.config_file


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section(_SECRETS_SECTION)
    if secrets_section:
        overrides = {
            "config_dir": secrets_section.get("config_dir"),
            "config_file": secrets_section.get("config_file"),
            "log_level": secrets_section.get("log_level"),
            "ranking_limit": secrets_section.get("ranking_limit"),
        }

    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def configure_logging(level: str | int | None = None) -> None:
    """Install the root log format once; later calls only adjust the level."""

    resolved = level if level is not None else get_settings().log_level
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    else:
        root.setLevel(resolved)
