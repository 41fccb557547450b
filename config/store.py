"""Persisted statement settings (company header and folder paths)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from config.settings import get_settings

__all__ = [
    "AppConfig",
    "ConfigStoreError",
    "ConfigStore",
    "JsonConfigStore",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)


class ConfigStoreError(RuntimeError):
    """Raised when the config file cannot be written."""


class AppConfig(BaseModel):
    """Company details printed on statements plus the input/output folders."""

    company_name: str = "百惠行对账单"
    address: str = "东莞市黄江镇华南塑胶城区132号"
    phone: str = "(0769) 83631717"
    fax: str = "83637787"
    raw_data_path: str = "raw-data"
    output_path: str = "output"


class ConfigStore(Protocol):
    def load_config(self) -> AppConfig:
        """Return the stored configuration, or defaults when none is usable."""

    def save_config(self, config: AppConfig) -> None:
        """Persist ``config``; raise :class:`ConfigStoreError` on failure."""


def _resolve_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    return get_settings().config_path


def load_config(path: str | Path | None = None) -> AppConfig:
    """Read the JSON config file, falling back to defaults on any problem."""

    config_path = _resolve_path(path)
    if not config_path.exists():
        return AppConfig()

    try:
        content = config_path.read_text(encoding="utf-8")
        return AppConfig.model_validate_json(content)
    except (OSError, ValidationError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return AppConfig()


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    config_path = _resolve_path(path)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigStoreError(f"创建配置目录失败: {exc}") from exc

    content = json.dumps(config.model_dump(), ensure_ascii=False, indent=2)
    try:
        config_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ConfigStoreError(f"保存配置失败: {exc}") from exc

    logger.debug("Saved config to %s", config_path)
    return config_path


class JsonConfigStore:
    """:class:`ConfigStore` backed by a single JSON file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = _resolve_path(path)

    def load_config(self) -> AppConfig:
        return load_config(self.path)

    def save_config(self, config: AppConfig) -> None:
        save_config(config, self.path)
