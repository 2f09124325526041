"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
from unittest.mock import patch

import pytest
import yaml

from spain_quakes.core.config import Config, USGS_API_BASE
from spain_quakes.core.query import BoundingBox, SPAIN_BOUNDS
from spain_quakes.shell.config_loader import (
    _parse_bounds,
    apply_env_overrides,
    load_config,
    load_config_from_dict,
)


ENV_VARS = (
    "CONFIG_PATH",
    "USGS_API_BASE",
    "REQUEST_TIMEOUT",
    "YEARS_BACK",
    "APP_LOCALE",
    "APP_TIMEZONE",
    "HOST",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env():
    """Run with none of the override variables set."""
    saved = {k: os.environ.pop(k) for k in ENV_VARS if k in os.environ}
    yield
    os.environ.update(saved)


class TestDefaults:
    def test_default_config(self):
        config = Config()

        assert config.usgs_api_base == USGS_API_BASE
        assert config.request_timeout_seconds is None
        assert config.years_back == 50
        assert config.result_limit == 20000
        assert config.bounds == SPAIN_BOUNDS
        assert config.locale == "es_ES"


class TestParseBounds:
    def test_parses_valid_bounds(self):
        data = {
            "min_latitude": 36,
            "max_latitude": 44,
            "min_longitude": -9.5,
            "max_longitude": 4,
        }
        assert _parse_bounds(data) == BoundingBox(36.0, 44.0, -9.5, 4.0)

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            _parse_bounds({"min_latitude": 36})


class TestLoadConfigFromDict:
    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == Config()

    def test_reads_all_fields(self):
        config = load_config_from_dict({
            "usgs_api_base": "https://mirror.example/query",
            "request_timeout_seconds": 20,
            "years_back": 10,
            "result_limit": 500,
            "bounds": {
                "min_latitude": 27,
                "max_latitude": 30,
                "min_longitude": -18.5,
                "max_longitude": -13,
            },
            "locale": "en_GB",
            "timezone": "Atlantic/Canary",
            "host": "0.0.0.0",
            "port": 9000,
            "log_level": "debug",
        })

        assert config.usgs_api_base == "https://mirror.example/query"
        assert config.request_timeout_seconds == 20.0
        assert config.years_back == 10
        assert config.result_limit == 500
        assert config.bounds.min_longitude == -18.5
        assert config.locale == "en_GB"
        assert config.timezone == "Atlantic/Canary"
        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.log_level == "DEBUG"

    def test_result_limit_is_clamped(self):
        config = load_config_from_dict({"result_limit": 50000})
        assert config.result_limit == 20000

    def test_null_timeout_means_no_timeout(self):
        config = load_config_from_dict({"request_timeout_seconds": None})
        assert config.request_timeout_seconds is None

    def test_bad_number_raises(self):
        with pytest.raises(ValueError):
            load_config_from_dict({"port": "eighty"})


class TestApplyEnvOverrides:
    def test_overrides_fields(self, clean_env):
        env = {"PORT": "8080", "REQUEST_TIMEOUT": "5", "APP_LOCALE": "en_US", "LOG_LEVEL": "warning"}
        with patch.dict(os.environ, env):
            config = apply_env_overrides(Config())

        assert config.port == 8080
        assert config.request_timeout_seconds == 5.0
        assert config.locale == "en_US"
        assert config.log_level == "WARNING"

    def test_empty_values_are_ignored(self, clean_env):
        with patch.dict(os.environ, {"PORT": ""}):
            config = apply_env_overrides(Config())
        assert config.port == 8000


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path, clean_env):
        config = load_config(tmp_path / "nope.yaml")
        assert config == Config()

    def test_empty_file_uses_defaults(self, tmp_path, clean_env):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_reads_yaml_file(self, tmp_path, clean_env):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"years_back": 20, "locale": "en_US"}))

        config = load_config(path)

        assert config.years_back == 20
        assert config.locale == "en_US"

    def test_uses_config_path_env(self, tmp_path, clean_env):
        path = tmp_path / "custom.yaml"
        path.write_text("port: 9100\n")

        with patch.dict(os.environ, {"CONFIG_PATH": str(path)}):
            config = load_config()

        assert config.port == 9100

    def test_env_wins_over_file(self, tmp_path, clean_env):
        path = tmp_path / "config.yaml"
        path.write_text("port: 9100\n")

        with patch.dict(os.environ, {"PORT": "9200"}):
            config = load_config(path)

        assert config.port == 9200

    def test_invalid_yaml_raises(self, tmp_path, clean_env):
        path = tmp_path / "config.yaml"
        path.write_text("years_back: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path)
