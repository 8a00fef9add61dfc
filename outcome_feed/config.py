"""Settings loading: built-in defaults, overlaid by settings.yaml, then env."""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError
from .ingestion.api_client import DEFAULT_BASE_URL, DEFAULT_MIN_INTERVAL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "config" / "settings.yaml"

DEFAULT_SETTINGS = {
    "api": {
        "base_url": DEFAULT_BASE_URL,
        "timeout": DEFAULT_TIMEOUT,
        "min_request_interval": DEFAULT_MIN_INTERVAL,
    },
    "fetch": {
        "index": "BTC",
        "granularity": "minute",
        "lookback_hours": 24,
    },
    "publish": {
        "redis_url": None,
        "queue": "outcomes",
    },
}

# env var -> (section, key)
ENV_OVERRIDES = {
    "BITMEX_API_BASE": ("api", "base_url"),
    "REDIS_URL": ("publish", "redis_url"),
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(settings: dict, source) -> dict:
    for section in DEFAULT_SETTINGS:
        if not isinstance(settings.get(section), dict):
            raise ConfigError(f"Section '{section}' in {source} must be a mapping, "
                              f"got {settings.get(section)!r}")

    api = settings["api"]
    for key in ("timeout", "min_request_interval"):
        value = api.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ConfigError(f"api.{key} in {source} must be a non-negative number, got {value!r}")
    return settings


def load_settings(path: Optional[Path] = None, use_env: bool = True) -> dict:
    """Load settings from YAML on top of the defaults.

    A missing file at the default location is not an error (defaults apply);
    an explicitly requested file that is missing or malformed is.
    """
    explicit = path is not None
    path = Path(path) if explicit else CONFIG_PATH

    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if path.exists():
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings from {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        settings = _merge(settings, loaded)
        logger.debug(f"Loaded settings from {path}")
    elif explicit:
        raise ConfigError(f"Settings file not found: {path}")

    if use_env:
        # sections must be mappings before env values are written into them
        _validate(settings, path)
        load_dotenv()
        for var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(var)
            if value:
                settings[section][key] = value

    return _validate(settings, path)
