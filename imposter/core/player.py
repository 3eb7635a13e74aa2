"""
Player record for a round in progress.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class PlayerRecord:
    """Represents a seated player."""
    index: int
    name: str
    is_imposter: bool
    is_eliminated: bool = False
    role_revealed_on_elimination: bool = False

    def __str__(self) -> str:
        return f"Player {self.index + 1} ({self.name})"

    @property
    def is_active(self) -> bool:
        return not self.is_eliminated

    def eliminate(self, reveal_role: bool) -> bool:
        """Mark player as eliminated. Elimination is one-way."""
        if self.is_eliminated:
            return False
        self.is_eliminated = True
        self.role_revealed_on_elimination = reveal_role
        return True

    def to_dict(self, show_role: bool = False) -> Dict[str, Any]:
        role_visible = show_role or self.role_revealed_on_elimination
        return {
            "index": self.index,
            "name": self.name,
            "is_eliminated": self.is_eliminated,
            "role_revealed": role_visible,
            "is_imposter": self.is_imposter if role_visible else None,
        }
