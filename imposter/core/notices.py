"""
User-facing notices raised alongside session transitions.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .configuration import GameConfiguration
    from .round_engine import GameOutcome


class NoticeLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: str
    title: str
    message: str
    level: NoticeLevel = NoticeLevel.INFO

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["level"] = self.level.value
        return data


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def options_fetch_failed(error: str) -> Notice:
    return Notice("options_fetch_failed", "Error Loading Game Options", error, NoticeLevel.ERROR)


def options_still_loading() -> Notice:
    return Notice(
        "options_loading",
        "Still Loading Options",
        "Game options are being fetched. Please wait a moment and try again.",
    )


def category_options_not_found(category: str) -> Notice:
    return Notice(
        "empty_category_options",
        "Category Options Not Found",
        f"No options found for '{category}' in the fetched data. Using a general random option.",
    )


def no_options_available() -> Notice:
    return Notice(
        "no_options_available",
        "No Game Options Available",
        "The game options list is empty. Using a default item.",
        NoticeLevel.WARNING,
    )


def configuration_saved(configuration: "GameConfiguration") -> Notice:
    reveal = "Yes" if configuration.reveal_on_elimination else "No"
    return Notice(
        "configuration_saved",
        "Configuration Saved!",
        f"Next, enter names for {configuration.player_count} players. "
        f"{_plural(configuration.imposter_count, 'imposter')}. Reveal role: {reveal}.",
    )


def all_set(configuration: "GameConfiguration") -> Notice:
    return Notice(
        "all_set",
        "All Set!",
        f"Game ready with {configuration.player_count} players "
        f"({_plural(configuration.imposter_count, 'imposter')}). Category: {configuration.category}.",
    )


def game_over(outcome: "GameOutcome") -> Notice:
    return Notice("game_over", "Game Over!", outcome.message)
