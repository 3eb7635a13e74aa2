"""
Game configuration: category catalogue, the editable form draft, and the
immutable per-game configuration.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .exceptions import InvalidConfiguration


MIN_PLAYERS = 3
MAX_PLAYERS = 20
DEFAULT_PLAYERS = 5
MIN_IMPOSTERS = 1


@dataclass(frozen=True)
class Category:
    """A selectable category of secret items."""
    value: str
    label: str


CATEGORIES: List[Category] = [
    Category("location", "Locations"),
    Category("cities", "Cities"),
    Category("activities", "Activities"),
    Category("movies", "Movies"),
    Category("games", "Video Games"),
    Category("mythology", "Mythology"),
]


def get_category(value: str) -> Optional[Category]:
    """Look up a catalogue category by value (case-insensitive)."""
    key = value.strip().lower()
    for category in CATEGORIES:
        if category.value == key:
            return category
    return None


def max_imposters_for(player_count: int) -> int:
    """Largest imposter count allowed for a table of this size."""
    return max(MIN_IMPOSTERS, player_count // 4)


def clamp_imposters(imposter_count: int, player_count: int) -> int:
    return max(MIN_IMPOSTERS, min(imposter_count, max_imposters_for(player_count)))


@dataclass(frozen=True)
class GameConfiguration:
    """Validated settings for one game. Immutable once the session moves on."""
    category: str
    player_count: int
    imposter_count: int
    reveal_on_elimination: bool = False

    def __post_init__(self):
        if not self.category or not self.category.strip():
            raise InvalidConfiguration("Please select a game category before starting.")
        category = get_category(self.category)
        if category is None:
            raise InvalidConfiguration(f"Unknown game category: {self.category!r}")
        object.__setattr__(self, "category", category.value)
        if self.player_count < MIN_PLAYERS:
            raise InvalidConfiguration(
                f"At least {MIN_PLAYERS} players are required (got {self.player_count})"
            )
        limit = max_imposters_for(self.player_count)
        if not MIN_IMPOSTERS <= self.imposter_count <= limit:
            raise InvalidConfiguration(
                f"Imposter count must be between {MIN_IMPOSTERS} and {limit} "
                f"for {self.player_count} players (got {self.imposter_count})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "player_count": self.player_count,
            "imposter_count": self.imposter_count,
            "reveal_on_elimination": self.reveal_on_elimination,
        }


@dataclass
class ConfigurationDraft:
    """
    Mutable configuration form state.

    Every player count change re-clamps the imposter count so that
    ``MIN_IMPOSTERS <= imposter_count <= max(1, player_count // 4)`` always holds.
    """
    category: str = field(default_factory=lambda: CATEGORIES[0].value)
    player_count: int = DEFAULT_PLAYERS
    imposter_count: int = MIN_IMPOSTERS
    reveal_on_elimination: bool = False
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS

    def __post_init__(self):
        self.set_player_count(self.player_count)

    @property
    def max_imposters(self) -> int:
        return max_imposters_for(self.player_count)

    def set_category(self, category: str) -> None:
        self.category = category.strip()

    def set_player_count(self, player_count: int) -> None:
        self.player_count = max(self.min_players, min(int(player_count), self.max_players))
        self.imposter_count = clamp_imposters(self.imposter_count, self.player_count)

    def set_imposter_count(self, imposter_count: int) -> None:
        self.imposter_count = clamp_imposters(int(imposter_count), self.player_count)

    def set_reveal_on_elimination(self, reveal: bool) -> None:
        if not isinstance(reveal, bool):
            raise InvalidConfiguration(
                f"reveal_on_elimination must be true or false (got {reveal!r})"
            )
        self.reveal_on_elimination = reveal

    def build(self) -> GameConfiguration:
        """Freeze the draft into a validated configuration."""
        return GameConfiguration(
            category=self.category,
            player_count=self.player_count,
            imposter_count=self.imposter_count,
            reveal_on_elimination=self.reveal_on_elimination,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **bounds) -> "ConfigurationDraft":
        """Build a draft from request/form data, applying the same clamping as the form."""
        draft = cls(**bounds)
        if "category" in data:
            draft.set_category(str(data["category"] or ""))
        if "player_count" in data:
            draft.set_player_count(data["player_count"])
        if "imposter_count" in data:
            draft.set_imposter_count(data["imposter_count"])
        if "reveal_on_elimination" in data:
            draft.set_reveal_on_elimination(data["reveal_on_elimination"])
        return draft
