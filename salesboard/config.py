from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Dict

import yaml

from salesboard.errors import ConfigError

DEFAULT_SOURCE_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "salesboard.db",
    "source_url": DEFAULT_SOURCE_URL,
    "fetch_timeout": 30,
    "loader": "json",
    "loaders": {
        "json": "salesboard.loaders.json_snapshot.JSONSnapshotLoader",
    },
    "per_page": 10,
    "max_per_page": None,
    "cors_origins": ["*"],
    "debug": False,
    "log_level": "INFO",
    "host": "127.0.0.1",
    "port": 5000,
}

ENV_OVERRIDES: Dict[str, str] = {
    "SALESBOARD_DB_PATH": "db_path",
    "SALESBOARD_SOURCE_URL": "source_url",
    "SALESBOARD_LOG_LEVEL": "log_level",
    "SALESBOARD_DEBUG": "debug",
}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def _apply_env(config: Dict[str, object]) -> Dict[str, object]:
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None or value == "":
            continue
        config[key] = _env_bool(value) if key == "debug" else value
    return config


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load *path* (YAML) on top of the defaults, then apply environment overrides.

    A missing *path* is not an error; the defaults are used instead.
    """
    data: Dict[str, object] = {}
    if path is not None and Path(path).exists():
        try:
            with Path(path).open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping at the top level")
    config = _merge_defaults(data, DEFAULT_CONFIG)
    return _apply_env(config)
