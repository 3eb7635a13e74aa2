"""
Configuration loader for YAML files and environment overrides.
"""

import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .app_config import AppConfig

logger = logging.getLogger(__name__)

# Environment variable -> (field, converter)
ENV_OVERRIDES = {
    "IMPOSTER_OPTIONS_URL": ("options_url", str),
    "IMPOSTER_LOG_LEVEL": ("log_level", str),
    "IMPOSTER_PORT": ("port", int),
}


def load_config_from_yaml(config_path: str) -> AppConfig:
    """
    Read an ``AppConfig`` from a YAML mapping. An empty file yields the defaults.

    Keys that are not ``AppConfig`` fields are logged and skipped.

    Raises:
        FileNotFoundError: no file at ``config_path``
        yaml.YAMLError: the file is not valid YAML
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open('r') as f:
        values = yaml.safe_load(f) or {}

    config = AppConfig()
    known = {item.name for item in fields(AppConfig)}
    for key, value in values.items():
        if key not in known:
            logger.warning("Unknown config key '%s' in %s", key, config_path)
            continue
        setattr(config, key, value)
    return config


def apply_env_overrides(config: AppConfig, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Override config fields from IMPOSTER_* environment variables."""
    environ = os.environ if environ is None else environ
    for name, (attr, convert) in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        try:
            setattr(config, attr, convert(raw))
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", name, raw)
    return config


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Defaults when no path is given, otherwise the YAML file at ``config_path``."""
    if config_path is None:
        return AppConfig()
    return load_config_from_yaml(config_path)
