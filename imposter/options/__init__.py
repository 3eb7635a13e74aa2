"""
Options provider: fetches the category -> secret items mapping.
"""

from .provider import GAME_OPTIONS_URL, OptionsProvider, OptionsResult, parse_options

__all__ = ['GAME_OPTIONS_URL', 'OptionsProvider', 'OptionsResult', 'parse_options']
