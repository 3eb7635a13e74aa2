"""
Naming sequencer: collects one name per player and shows each player their
secret for a fixed time before handing the device to the next player.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .exceptions import InvalidTransition, NameValidationError
from .roles import RoundAssignment

logger = logging.getLogger(__name__)

DEFAULT_REVEAL_DURATION_MS = 3000
DEFAULT_MAX_NAME_LENGTH = 30

Scheduler = Callable[[float, Callable[[], None]], Any]


def threading_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Run ``callback`` once after ``delay`` seconds on a daemon timer thread."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class ScheduledCall:
    """Handle returned by ManualScheduler."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler whose callbacks only run when ``run_pending`` is called.

    Used by the terminal front end, which blocks on its own clock, and by tests.
    """

    def __init__(self):
        self.calls: List[ScheduledCall] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(delay, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[ScheduledCall]:
        return [c for c in self.calls if not c.cancelled]

    def run_pending(self) -> int:
        """Fire every call that has not been cancelled. Returns the number fired."""
        calls, self.calls = self.calls, []
        fired = 0
        for call in calls:
            if not call.cancelled:
                call.callback()
                fired += 1
        return fired

    def run_all(self) -> int:
        """Fire every recorded call, cancelled or not."""
        calls, self.calls = self.calls, []
        for call in calls:
            call.callback()
        return len(calls)


class NamingState(Enum):
    ENTERING = "entering"
    REVEALING = "revealing"
    COMPLETE = "complete"


def normalize_name(name: Optional[str], max_length: int = DEFAULT_MAX_NAME_LENGTH) -> str:
    return (name or "").strip()[:max_length].strip()


class NamingSequencer:
    """
    Steps through player indices in order: Entering -> Revealing -> next index.

    The hide timer is scoped to a (generation, index) token. Navigation, a new
    submission and ``cancel`` bump the generation, so a timer that fires late
    for a superseded submission is discarded.
    """

    def __init__(self, assignment: RoundAssignment, player_count: int,
                 on_complete: Optional[Callable[[List[str]], None]] = None,
                 on_advance: Optional[Callable[[int], None]] = None,
                 scheduler: Scheduler = threading_scheduler,
                 reveal_duration_ms: int = DEFAULT_REVEAL_DURATION_MS,
                 max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
                 lock: Optional[threading.RLock] = None):
        if player_count < 1:
            raise ValueError("player_count must be positive")
        self.assignment = assignment
        self.player_count = player_count
        self.names: List[str] = [""] * player_count
        self.current_index = 0
        self.state = NamingState.ENTERING
        self.revealed_content: Optional[str] = None
        self.generation = 0
        self.reveal_duration_ms = reveal_duration_ms
        self.max_name_length = max_name_length
        self._on_complete = on_complete
        self._on_advance = on_advance
        self._scheduler = scheduler
        self._pending = None
        self._lock = lock or threading.RLock()

    @property
    def is_last_player(self) -> bool:
        return self.current_index == self.player_count - 1

    @property
    def is_complete(self) -> bool:
        return self.state == NamingState.COMPLETE

    @property
    def current_name(self) -> str:
        """Initial input value for the active index (empty if never entered)."""
        return self.names[self.current_index]

    @property
    def can_go_back(self) -> bool:
        return self.state == NamingState.ENTERING and self.current_index > 0

    def entered_names(self) -> List[Tuple[int, str]]:
        return [(i, name) for i, name in enumerate(self.names) if name]

    def submit(self, name: str) -> str:
        """
        Record a name for the active index and start its private reveal.

        Returns:
            The reveal content: the imposter label or the secret item.

        Raises:
            NameValidationError: name is empty after trimming (nothing changes)
            InvalidTransition: not currently accepting a name
        """
        with self._lock:
            if self.state != NamingState.ENTERING:
                raise InvalidTransition(
                    f"Cannot submit a name while {self.state.value}", stage=self.state.value
                )
            cleaned = normalize_name(name, self.max_name_length)
            if not cleaned:
                raise NameValidationError(self.current_index)

            self.names[self.current_index] = cleaned
            self.revealed_content = self.assignment.reveal_for(self.current_index)
            self.state = NamingState.REVEALING
            self._schedule_hide()
            return self.revealed_content

    def previous(self) -> None:
        """Go back one player. Names recorded for later players are kept."""
        with self._lock:
            if not self.can_go_back:
                raise InvalidTransition(
                    "Previous is only available while entering a name after the first player",
                    stage=self.state.value,
                )
            self._invalidate()
            self.current_index -= 1
            self.revealed_content = None
            self.state = NamingState.ENTERING

    def cancel(self) -> None:
        """Drop any pending reveal timer."""
        with self._lock:
            self._invalidate()

    def hide_reveal(self, token: Tuple[int, int]) -> bool:
        """
        End the reveal started for ``token`` and advance.

        Returns False (and changes nothing) if the token is stale.
        """
        with self._lock:
            if token != self._token() or self.state != NamingState.REVEALING:
                logger.debug("Discarding stale reveal timer %s (current %s)", token, self._token())
                return False

            self._pending = None
            self.revealed_content = None
            if self.is_last_player:
                self.state = NamingState.COMPLETE
                names = list(self.names)
                logger.info("All %d players named", self.player_count)
                if self._on_complete:
                    self._on_complete(names)
            else:
                self.current_index += 1
                self.state = NamingState.ENTERING
                if self._on_advance:
                    self._on_advance(self.current_index)
            return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "current_index": self.current_index,
            "player_count": self.player_count,
            "current_name": self.current_name,
            "revealed_content": self.revealed_content,
            "is_last_player": self.is_last_player,
            "can_go_back": self.can_go_back,
            "entered_names": [name for _, name in self.entered_names()],
        }

    def _token(self) -> Tuple[int, int]:
        return (self.generation, self.current_index)

    def _schedule_hide(self) -> None:
        self._invalidate()
        token = self._token()
        self._pending = self._scheduler(
            self.reveal_duration_ms / 1000.0, lambda: self.hide_reveal(token)
        )

    def _invalidate(self) -> None:
        self.generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
