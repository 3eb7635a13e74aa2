"""Application configuration module."""

from .app_config import AppConfig, default_config
from .config_loader import load_config, load_config_from_yaml, apply_env_overrides
from .logging_setup import configure_logging

__all__ = [
    'AppConfig',
    'default_config',
    'load_config',
    'load_config_from_yaml',
    'apply_env_overrides',
    'configure_logging',
]
