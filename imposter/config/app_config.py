"""
Application configuration and constants.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.configuration import MIN_PLAYERS, MAX_PLAYERS, DEFAULT_PLAYERS, MIN_IMPOSTERS
from ..core.naming import DEFAULT_REVEAL_DURATION_MS, DEFAULT_MAX_NAME_LENGTH
from ..options.provider import GAME_OPTIONS_URL, DEFAULT_TIMEOUT


@dataclass
class AppConfig:
    """Process-level settings. Per-game settings live in GameConfiguration."""

    # Options provider
    options_url: str = GAME_OPTIONS_URL
    options_timeout: float = DEFAULT_TIMEOUT  # seconds

    # Naming and reveal
    reveal_duration_ms: int = DEFAULT_REVEAL_DURATION_MS
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH

    # Configuration form bounds
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    default_players: int = DEFAULT_PLAYERS
    min_imposters: int = MIN_IMPOSTERS

    # Runtime
    log_level: str = "INFO"
    random_seed: Optional[int] = None  # Seed for reproducible role assignment

    # Web server
    host: str = "127.0.0.1"
    port: int = 5000


# Default configuration instance
default_config = AppConfig()
