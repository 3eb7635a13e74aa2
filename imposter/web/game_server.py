"""
Web server exposing the shared game session over HTTP and SocketIO.
"""

import logging
import threading
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit

from ..core.configuration import CATEGORIES, ConfigurationDraft
from ..core.exceptions import (
    ImposterGameError, InvalidConfiguration, InvalidPlayerIndex, NameValidationError,
)
from ..core.session import SessionController
from ..options.provider import OptionsProvider
from .event_emitter import EventEmitter

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    NameValidationError: 400,
    InvalidConfiguration: 400,
    InvalidPlayerIndex: 404,
}


class GameServer:
    """One device, one session: every client sees and drives the same game."""

    def __init__(self, controller: Optional[SessionController] = None,
                 event_emitter: Optional[EventEmitter] = None,
                 port: int = 5000, host: str = '127.0.0.1',
                 draft_bounds: Optional[Dict[str, int]] = None):
        self.port = port
        self.host = host
        self.event_emitter = event_emitter or EventEmitter()
        self.controller = controller or SessionController(event_emitter=self.event_emitter)
        if self.controller.event_emitter is None:
            self.controller.event_emitter = self.event_emitter
        self.draft_bounds = draft_bounds or {}
        self.options_thread: Optional[threading.Thread] = None
        self.clients_connected = 0

        self.app = Flask(__name__)
        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode='threading')

        self.event_emitter.register_listener(self._broadcast_event)

        self._setup_routes()
        self._setup_socketio()

    def _setup_routes(self):
        """Setup Flask routes."""
        app = self.app
        controller = self.controller

        @app.errorhandler(ImposterGameError)
        def handle_game_error(error: ImposterGameError):
            status = 409
            for error_type, code in _STATUS_BY_ERROR.items():
                if isinstance(error, error_type):
                    status = code
                    break
            return jsonify({"error": error.code, "message": error.message}), status

        @app.route('/api/state')
        def state():
            return jsonify(controller.snapshot())

        @app.route('/api/categories')
        def categories():
            return jsonify([{"value": c.value, "label": c.label} for c in CATEGORIES])

        @app.route('/api/configure', methods=['POST'])
        def configure():
            data = request.get_json(silent=True) or {}
            try:
                draft = ConfigurationDraft.from_dict(data, **self.draft_bounds)
            except (TypeError, ValueError) as exc:
                raise InvalidConfiguration(f"Invalid configuration: {exc}") from exc
            controller.configure(draft.build())
            return jsonify(controller.snapshot())

        @app.route('/api/names/submit', methods=['POST'])
        def submit_name():
            data = request.get_json(silent=True) or {}
            content = controller.submit_name(str(data.get("name") or ""))
            return jsonify({"revealed_content": content, "state": controller.snapshot()})

        @app.route('/api/names/previous', methods=['POST'])
        def previous_name():
            controller.previous_player()
            return jsonify(controller.snapshot())

        @app.route('/api/begin', methods=['POST'])
        def begin_round():
            controller.begin_round()
            return jsonify(controller.snapshot())

        @app.route('/api/players/<int:index>/eliminate', methods=['POST'])
        def eliminate(index: int):
            changed = controller.eliminate(index)
            return jsonify({"changed": changed, "state": controller.snapshot()})

        @app.route('/api/reset', methods=['POST'])
        def reset():
            controller.reset()
            return jsonify(controller.snapshot())

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('connect')
        def handle_connect():
            self.clients_connected += 1
            logger.info("Client connected. Total clients: %d", self.clients_connected)
            emit('state_update', {'state': self.controller.snapshot()})

        @self.socketio.on('disconnect')
        def handle_disconnect():
            self.clients_connected -= 1
            logger.info("Client disconnected. Total clients: %d", self.clients_connected)

    def _broadcast_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Broadcast an event to all connected clients."""
        if self.clients_connected > 0:
            self.socketio.emit(event_type, data)

    def load_options_in_background(self, provider: OptionsProvider) -> threading.Thread:
        """Fetch the options list once; configuring is refused until it resolves."""
        def fetch():
            self.controller.options_loaded(provider.load())

        self.options_thread = threading.Thread(target=fetch, name="options-fetch", daemon=True)
        self.options_thread.start()
        return self.options_thread

    def start(self) -> None:
        """Start the web server."""
        logger.info("Starting web server on http://%s:%d", self.host, self.port)
        self.socketio.run(self.app, host=self.host, port=self.port, debug=False, allow_unsafe_werkzeug=True)
