"""
Web interface module: event fan-out and the HTTP/SocketIO game server.
"""

from .event_emitter import EventEmitter
from .game_server import GameServer

__all__ = ['EventEmitter', 'GameServer']
