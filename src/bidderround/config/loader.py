"""Configuration loading from YAML files with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from bidderround.config.models import AppConfig

ENV_PREFIX = "BIDDERROUND__"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge override dict into base dict. Override values win."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found."""
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides.

    Convention: BIDDERROUND__SECTION__KEY=value
    Double underscore separates nesting levels.
    Example: BIDDERROUND__RESOLUTION__ANNUALIZATION_FACTOR=1
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX) :].lower().split("__")
        current = data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value
    return data


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """Load configuration from YAML files with environment overrides.

    Loading order (later values override earlier):
    1. config/base.yaml
    2. config/local.yaml (untracked, per-installation overrides)
    3. Environment variables (BIDDERROUND__SECTION__KEY)
    """
    config_dir = Path(config_dir)

    data = _load_yaml(config_dir / "base.yaml")
    data = _deep_merge(data, _load_yaml(config_dir / "local.yaml"))
    data = _apply_env_overrides(data)

    return AppConfig.from_dict(data)
