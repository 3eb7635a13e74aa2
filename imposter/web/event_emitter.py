"""
Event emitter that fans session events out to registered listeners.
"""

import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from ..core.notices import Notice

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """Delivers session events (notices, state updates) to listeners."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = Lock()

    def register_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event to every listener."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception:
                # Don't let a broken listener break the game
                logger.exception("Listener failed while handling '%s'", event_type)

    def emit_notice(self, notice: Notice) -> None:
        self._emit("notice", notice.to_dict())

    def emit_stage_change(self, stage: str) -> None:
        self._emit("stage_change", {"stage": stage})

    def emit_elimination(self, player_index: int, name: str, role_revealed: bool,
                         is_imposter: Optional[bool] = None) -> None:
        """Emit player elimination event."""
        self._emit("elimination", {
            "player_index": player_index,
            "name": name,
            "role_revealed": role_revealed,
            "is_imposter": is_imposter if role_revealed else None,
        })

    def emit_game_over(self, winner: str, reason: str, message: str) -> None:
        self._emit("game_over", {
            "winner": winner,
            "reason": reason,
            "message": message,
        })

    def emit_state_update(self, state: Dict[str, Any]) -> None:
        self._emit("state_update", {"state": state})
