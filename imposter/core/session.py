"""
Session controller: the top-level stage machine that composes role
assignment, the naming sequencer and the round engine.
"""

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from . import notices
from .configuration import GameConfiguration
from .exceptions import InvalidTransition, PrematureTransition
from .naming import (
    NamingSequencer, Scheduler, threading_scheduler,
    DEFAULT_REVEAL_DURATION_MS, DEFAULT_MAX_NAME_LENGTH,
)
from .notices import Notice
from .roles import RoundAssignment, ItemSource, assign_roles
from .round_engine import RoundEngine

if TYPE_CHECKING:
    from ..config.app_config import AppConfig
    from ..options.provider import OptionsResult
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class SessionStage(Enum):
    """Current session stage."""
    CONFIGURING = "configuring"
    NAMING_PLAYERS = "naming_players"
    READY_TO_BEGIN = "ready_to_begin"
    PLAYING_ROUND = "playing_round"


@dataclass(frozen=True)
class GameSnapshot:
    """Everything fixed once naming completes."""
    configuration: GameConfiguration
    assignment: RoundAssignment
    names: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configuration": self.configuration.to_dict(),
            "names": list(self.names),
        }


class SessionController:
    """
    Owns all game state and is the only path that mutates it.

    Stages move strictly forward (Configuring -> NamingPlayers -> ReadyToBegin
    -> PlayingRound); ``reset`` returns to Configuring from anywhere. The
    options result is kept across resets.
    """

    def __init__(self, event_emitter: Optional['EventEmitter'] = None,
                 scheduler: Scheduler = threading_scheduler,
                 rng: Optional[random.Random] = None,
                 reveal_duration_ms: int = DEFAULT_REVEAL_DURATION_MS,
                 max_name_length: int = DEFAULT_MAX_NAME_LENGTH):
        self.event_emitter = event_emitter
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.reveal_duration_ms = reveal_duration_ms
        self.max_name_length = max_name_length

        self._lock = threading.RLock()
        self.options: Optional['OptionsResult'] = None  # None while the fetch is pending
        self.notices: List[Notice] = []
        self._fetch_error_announced = False
        self._clear_game()

    @classmethod
    def from_config(cls, config: 'AppConfig', event_emitter: Optional['EventEmitter'] = None,
                    scheduler: Scheduler = threading_scheduler) -> "SessionController":
        rng = random.Random(config.random_seed) if config.random_seed is not None else None
        return cls(
            event_emitter=event_emitter,
            scheduler=scheduler,
            rng=rng,
            reveal_duration_ms=config.reveal_duration_ms,
            max_name_length=config.max_name_length,
        )

    def _clear_game(self) -> None:
        self.stage = SessionStage.CONFIGURING
        self.configuration: Optional[GameConfiguration] = None
        self.assignment: Optional[RoundAssignment] = None
        self.sequencer: Optional[NamingSequencer] = None
        self.game: Optional[GameSnapshot] = None
        self.round: Optional[RoundEngine] = None

    @property
    def options_loading(self) -> bool:
        return self.options is None

    def options_loaded(self, result: 'OptionsResult') -> None:
        """Record the resolved options fetch, successful or not."""
        with self._lock:
            self.options = result
            if result.failed:
                self._notify(notices.options_fetch_failed(result.error))
                self._fetch_error_announced = True
            self._emit_state()

    def configure(self, configuration: GameConfiguration) -> RoundAssignment:
        """
        Configuring -> NamingPlayers.

        Raises:
            PrematureTransition: options are still loading; retry later
            InvalidTransition: not in the configuring stage
        """
        with self._lock:
            self._require_stage(SessionStage.CONFIGURING, "configure")
            if self.options_loading:
                self._notify(notices.options_still_loading())
                raise PrematureTransition(
                    "Game options are still loading. Please wait a moment and try again."
                )

            assignment = assign_roles(configuration, self.options.options, self.rng)
            self._announce_item_source(configuration, assignment)

            self.configuration = configuration
            self.assignment = assignment
            self.sequencer = NamingSequencer(
                assignment,
                configuration.player_count,
                on_complete=self._names_completed,
                on_advance=lambda index: self._emit_state(),
                scheduler=self.scheduler,
                reveal_duration_ms=self.reveal_duration_ms,
                max_name_length=self.max_name_length,
                lock=self._lock,
            )
            self._set_stage(SessionStage.NAMING_PLAYERS)
            self._notify(notices.configuration_saved(configuration))
            self._emit_state()
            return assignment

    def submit_name(self, name: str) -> str:
        """Submit the active player's name; returns the content of their private reveal."""
        with self._lock:
            self._require_stage(SessionStage.NAMING_PLAYERS, "submit a name")
            content = self.sequencer.submit(name)
            self._emit_state()
            return content

    def previous_player(self) -> None:
        with self._lock:
            self._require_stage(SessionStage.NAMING_PLAYERS, "go back")
            self.sequencer.previous()
            self._emit_state()

    def _names_completed(self, names: List[str]) -> None:
        # Called by the sequencer (under the shared lock) when the last reveal ends.
        if self.stage != SessionStage.NAMING_PLAYERS:
            return
        self.game = GameSnapshot(self.configuration, self.assignment, tuple(names))
        self._set_stage(SessionStage.READY_TO_BEGIN)
        self._notify(notices.all_set(self.configuration))
        self._emit_state()

    def begin_round(self) -> RoundEngine:
        """ReadyToBegin -> PlayingRound."""
        with self._lock:
            self._require_stage(SessionStage.READY_TO_BEGIN, "begin the round")
            self.round = RoundEngine.from_snapshot(self.game)
            self._set_stage(SessionStage.PLAYING_ROUND)
            self._emit_state()
            return self.round

    def eliminate(self, index: int) -> bool:
        """
        Eliminate a player. Returns False if nothing changed (already out or
        game over).
        """
        with self._lock:
            self._require_stage(SessionStage.PLAYING_ROUND, "eliminate a player")
            if not self.round.eliminate(index):
                return False

            player = self.round.players[index]
            if self.event_emitter:
                self.event_emitter.emit_elimination(
                    index, player.name, player.role_revealed_on_elimination, player.is_imposter
                )
            outcome = self.round.outcome
            if outcome:
                self._notify(notices.game_over(outcome))
                if self.event_emitter:
                    self.event_emitter.emit_game_over(outcome.winner.value, outcome.reason, outcome.message)
            self._emit_state()
            return True

    def reset(self) -> None:
        """Discard configuration, assignment, names and round state."""
        with self._lock:
            if self.sequencer:
                self.sequencer.cancel()
            self._clear_game()
            logger.info("Session reset")
            if self.event_emitter:
                self.event_emitter.emit_stage_change(self.stage.value)
            self._emit_state()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-safe view of the whole session."""
        with self._lock:
            return {
                "stage": self.stage.value,
                "options_loading": self.options_loading,
                "options_error": self.options.error if self.options else None,
                "configuration": self.configuration.to_dict() if self.configuration else None,
                "naming": (
                    self.sequencer.to_dict()
                    if self.sequencer and self.stage == SessionStage.NAMING_PLAYERS else None
                ),
                "roster": list(self.game.names) if self.game else [],
                "round": self.round.get_summary() if self.round else None,
            }

    def _require_stage(self, stage: SessionStage, action: str) -> None:
        if self.stage != stage:
            raise InvalidTransition(
                f"Cannot {action} while {self.stage.value}", stage=self.stage.value
            )

    def _set_stage(self, stage: SessionStage) -> None:
        logger.info("Session stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        if self.event_emitter:
            self.event_emitter.emit_stage_change(stage.value)

    def _announce_item_source(self, configuration: GameConfiguration,
                              assignment: RoundAssignment) -> None:
        if assignment.item_source is ItemSource.GLOBAL_POOL:
            self._notify(notices.category_options_not_found(configuration.category))
        elif assignment.item_source is ItemSource.DEFAULT:
            # A failed fetch was already announced when it resolved.
            if not (self.options.failed and self._fetch_error_announced):
                self._notify(notices.no_options_available())

    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        log = logger.warning if notice.level.value != "info" else logger.info
        log("%s: %s", notice.title, notice.message)
        if self.event_emitter:
            self.event_emitter.emit_notice(notice)

    def _emit_state(self) -> None:
        if self.event_emitter:
            self.event_emitter.emit_state_update(self.snapshot())
