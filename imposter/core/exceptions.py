"""
Exceptions for game session errors.
"""

from typing import Optional


class ImposterGameError(Exception):
    """Base class for all recoverable game session errors."""

    code = "game_error"

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class OptionsFetchFailed(ImposterGameError):
    """Raised when the game options list cannot be fetched or parsed."""

    code = "options_fetch_failed"


class InvalidConfiguration(ImposterGameError):
    """Raised when a game configuration violates its bounds."""

    code = "invalid_configuration"


class NameValidationError(ImposterGameError):
    """Raised when a submitted player name is empty after trimming."""

    code = "name_required"

    def __init__(self, player_index: int, message: str = ""):
        self.player_index = player_index
        super().__init__(message or f"Please enter a name for Player {player_index + 1}.")


class PrematureTransition(ImposterGameError):
    """Raised when the session is advanced before its inputs are ready."""

    code = "premature_transition"


class InvalidTransition(ImposterGameError):
    """Raised when an action is not allowed in the current stage or state."""

    code = "invalid_transition"

    def __init__(self, message: str = "", stage: Optional[str] = None):
        self.stage = stage
        super().__init__(message)


class InvalidPlayerIndex(ImposterGameError, IndexError):
    """Raised when a player index is outside the roster."""

    code = "invalid_player"

    def __init__(self, player_index: int, player_count: int):
        self.player_index = player_index
        self.player_count = player_count
        super().__init__(f"Player index {player_index} is out of range (0..{player_count - 1})")
