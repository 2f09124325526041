"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in spain_quakes/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from spain_quakes.core.config import Config
from spain_quakes.core.query import BoundingBox, MAX_RESULT_LIMIT


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

# Environment variable -> (Config field, converter)
ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "USGS_API_BASE": ("usgs_api_base", str),
    "REQUEST_TIMEOUT": ("request_timeout_seconds", float),
    "YEARS_BACK": ("years_back", int),
    "APP_LOCALE": ("locale", str),
    "APP_TIMEZONE": ("timezone", str),
    "HOST": ("host", str),
    "PORT": ("port", int),
    "LOG_LEVEL": ("log_level", str),
}


def _parse_bounds(data: dict[str, Any]) -> BoundingBox:
    """Parse a bounding box from config data."""
    return BoundingBox(
        min_latitude=float(data["min_latitude"]),
        max_latitude=float(data["max_latitude"]),
        min_longitude=float(data["min_longitude"]),
        max_longitude=float(data["max_longitude"]),
    )


def _parse_timeout(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _clamp_limit(value: Any) -> int:
    limit = int(value)
    if limit > MAX_RESULT_LIMIT:
        logger.warning(
            "result_limit %d exceeds feed maximum, using %d",
            limit,
            MAX_RESULT_LIMIT,
        )
        return MAX_RESULT_LIMIT
    return limit


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Pure function: unknown keys are ignored, missing keys use defaults.

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    bounds = defaults.bounds
    if "bounds" in data:
        bounds = _parse_bounds(data["bounds"])

    return Config(
        usgs_api_base=data.get("usgs_api_base", defaults.usgs_api_base),
        request_timeout_seconds=_parse_timeout(data.get("request_timeout_seconds")),
        years_back=int(data.get("years_back", defaults.years_back)),
        result_limit=_clamp_limit(data.get("result_limit", defaults.result_limit)),
        bounds=bounds,
        locale=data.get("locale", defaults.locale),
        timezone=data.get("timezone", defaults.timezone),
        host=data.get("host", defaults.host),
        port=int(data.get("port", defaults.port)),
        log_level=str(data.get("log_level", defaults.log_level)).upper(),
    )


def apply_env_overrides(config: Config) -> Config:
    """Override config fields from environment variables.

    Args:
        config: Base configuration

    Returns:
        The same Config object, updated in place
    """
    for env_var, (field_name, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            setattr(config, field_name, convert(value))
            logger.debug("Config %s overridden by %s", field_name, env_var)

    config.log_level = config.log_level.upper()
    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file plus environment overrides.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        ValueError: If a numeric setting cannot be parsed
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return apply_env_overrides(Config())

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return apply_env_overrides(Config())

    config = apply_env_overrides(load_config_from_dict(data))

    logger.info(
        "Loaded config: %d years back, limit %d, locale %s",
        config.years_back,
        config.result_limit,
        config.locale,
    )

    return config
