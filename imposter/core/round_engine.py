"""
Round engine: elimination state for a fixed roster and win-condition checks.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Dict, Any, Sequence, TYPE_CHECKING

from .exceptions import InvalidPlayerIndex
from .player import PlayerRecord

if TYPE_CHECKING:
    from .session import GameSnapshot

logger = logging.getLogger(__name__)


class Winner(Enum):
    PLAYERS = "players"
    IMPOSTERS = "imposters"


REASON_ALL_IMPOSTERS_ELIMINATED = "all imposters eliminated"
REASON_ALL_LOYAL_ELIMINATED = "all loyal players eliminated"
REASON_IMPOSTERS_MATCH_LOYAL = "imposters' numbers match or exceed loyal players"

_MESSAGES = {
    REASON_ALL_IMPOSTERS_ELIMINATED: "Players Win! All imposters have been eliminated.",
    REASON_ALL_LOYAL_ELIMINATED: "Imposters Win! All loyal players have been eliminated.",
    REASON_IMPOSTERS_MATCH_LOYAL: "Imposters Win! Their numbers match or exceed the loyal players.",
}


@dataclass(frozen=True)
class GameOutcome:
    winner: Winner
    reason: str

    @property
    def message(self) -> str:
        return _MESSAGES.get(self.reason, f"{self.winner.value.title()} Win! {self.reason}.")

    def to_dict(self) -> Dict[str, Any]:
        return {"winner": self.winner.value, "reason": self.reason, "message": self.message}


def evaluate_outcome(players: Sequence[PlayerRecord], total_imposters: int) -> Optional[GameOutcome]:
    """
    Check the win condition over the full roster.
    Returns None if the game continues.
    """
    remaining = [p for p in players if not p.is_eliminated]
    imposters = sum(1 for p in remaining if p.is_imposter)
    loyal = len(remaining) - imposters

    if total_imposters > 0 and imposters == 0:
        return GameOutcome(Winner.PLAYERS, REASON_ALL_IMPOSTERS_ELIMINATED)
    if imposters > 0 and loyal == 0:
        return GameOutcome(Winner.IMPOSTERS, REASON_ALL_LOYAL_ELIMINATED)
    if imposters > 0 and loyal > 0 and imposters >= loyal:
        return GameOutcome(Winner.IMPOSTERS, REASON_IMPOSTERS_MATCH_LOYAL)
    return None


class RoundEngine:
    """Tracks eliminations and freezes the outcome once one is reached."""

    def __init__(self, players: List[PlayerRecord], total_imposters: int,
                 reveal_on_elimination: bool = False):
        self.players = players
        self.total_imposters = total_imposters
        self.reveal_on_elimination = reveal_on_elimination
        self.outcome: Optional[GameOutcome] = None
        self.elimination_order: List[int] = []

    @classmethod
    def from_snapshot(cls, snapshot: "GameSnapshot") -> "RoundEngine":
        """Seat the named roster captured when naming finished."""
        players = [
            PlayerRecord(index=i, name=name, is_imposter=snapshot.assignment.is_imposter(i))
            for i, name in enumerate(snapshot.names)
        ]
        return cls(
            players,
            total_imposters=snapshot.configuration.imposter_count,
            reveal_on_elimination=snapshot.configuration.reveal_on_elimination,
        )

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def get_player(self, index: int) -> PlayerRecord:
        if not 0 <= index < len(self.players):
            raise InvalidPlayerIndex(index, len(self.players))
        return self.players[index]

    def get_remaining_players(self) -> List[PlayerRecord]:
        return [p for p in self.players if p.is_active]

    def eliminate(self, index: int) -> bool:
        """
        Eliminate a player and re-check the win condition.

        Returns False without changing anything if the game is over or the
        player is already out.
        """
        player = self.get_player(index)
        if self.is_over or player.is_eliminated:
            return False

        player.eliminate(reveal_role=self.reveal_on_elimination)
        self.elimination_order.append(index)
        logger.info("%s eliminated", player)

        self.outcome = evaluate_outcome(self.players, self.total_imposters)
        if self.outcome:
            logger.info("Game over: %s", self.outcome.message)
        return True

    def get_summary(self, reveal_all: Optional[bool] = None) -> Dict[str, Any]:
        """Round view. Every role is shown once the game is over unless ``reveal_all`` says otherwise."""
        show_roles = self.is_over if reveal_all is None else reveal_all
        return {
            "players": [p.to_dict(show_role=show_roles) for p in self.players],
            "remaining_count": len(self.get_remaining_players()),
            "elimination_order": list(self.elimination_order),
            "is_over": self.is_over,
            "outcome": self.outcome.to_dict() if self.outcome else None,
        }
