"""Unit tests for configuration loading and validation."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from bidderround.config.loader import _apply_env_overrides, _deep_merge, load_config
from bidderround.config.models import AppConfig, LoggingConfig, ResolutionConfig


class TestDeepMerge:
    def test_flat_merge(self) -> None:
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        assert _deep_merge(base, override) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        base = {"x": {"a": 1, "b": 2}}
        override = {"x": {"b": 3, "c": 4}}
        assert _deep_merge(base, override) == {"x": {"a": 1, "b": 3, "c": 4}}

    def test_override_replaces_non_dict(self) -> None:
        base = {"x": {"a": 1}}
        override = {"x": "flat"}
        assert _deep_merge(base, override) == {"x": "flat"}


class TestEnvOverrides:
    def test_simple_override(self) -> None:
        data: dict = {"resolution": {"annualization_factor": 12}}
        with patch.dict(os.environ, {"BIDDERROUND__RESOLUTION__ANNUALIZATION_FACTOR": "1"}):
            result = _apply_env_overrides(data)
        assert result["resolution"]["annualization_factor"] == "1"

    def test_creates_nested_keys(self) -> None:
        data: dict = {}
        with patch.dict(os.environ, {"BIDDERROUND__LOGGING__LEVEL": "DEBUG"}):
            result = _apply_env_overrides(data)
        assert result["logging"]["level"] == "DEBUG"

    def test_ignores_non_prefixed(self) -> None:
        data: dict = {"a": 1}
        with patch.dict(os.environ, {"OTHER_VAR": "value"}, clear=False):
            result = _apply_env_overrides(data)
        assert "other_var" not in result


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.resolution.annualization_factor == 12
        assert config.database.url == "sqlite:///bidderround.db"
        assert config.logging.level == "INFO"

    def test_logging_level_validation(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(level="INVALID")

    def test_logging_level_normalized(self) -> None:
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_annualization_factor_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ResolutionConfig(annualization_factor=0)

    def test_from_dict(self) -> None:
        config = AppConfig.from_dict({"resolution": {"annualization_factor": "1"}, "logging": {"level": "DEBUG"}})
        assert config.resolution.annualization_factor == 1
        assert config.logging.level == "DEBUG"


class TestLoadConfig:
    def test_load_from_empty_dir(self, tmp_path: Path) -> None:
        config = load_config(config_dir=tmp_path)
        assert config.resolution.annualization_factor == 12

    def test_load_with_base_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text(yaml.dump({"database": {"url": "sqlite:///other.db"}}))
        config = load_config(config_dir=tmp_path)
        assert config.database.url == "sqlite:///other.db"

    def test_local_overlay(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text(yaml.dump({"logging": {"level": "INFO", "json_output": True}}))
        (tmp_path / "local.yaml").write_text(yaml.dump({"logging": {"level": "DEBUG"}}))

        config = load_config(config_dir=tmp_path)
        assert config.logging.level == "DEBUG"
        assert config.logging.json_output is True

    def test_env_wins_over_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text(yaml.dump({"resolution": {"annualization_factor": 12}}))
        with patch.dict(os.environ, {"BIDDERROUND__RESOLUTION__ANNUALIZATION_FACTOR": "1"}):
            config = load_config(config_dir=tmp_path)
        assert config.resolution.annualization_factor == 1

    def test_repository_base_yaml_is_valid(self) -> None:
        config_dir = Path(__file__).resolve().parents[2] / "config"
        config = load_config(config_dir=config_dir)
        assert config.resolution.annualization_factor == 12
