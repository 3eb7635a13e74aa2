"""Terminal front end."""

from .terminal import TerminalGame

__all__ = ['TerminalGame']
