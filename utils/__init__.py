"""
Utilities module for Cards Against Humanity.

This module contains constants and helper functions
used throughout the application.
"""

from .constants import MIN_PLAYERS, HAND_SIZE, TIMER_TAGS, DEADLINE_WARNINGS, COMMANDS
from .helpers import pluralize, format_entry, display_prompt, parse_command_args, parse_indexes

__all__ = [
    'MIN_PLAYERS',
    'HAND_SIZE',
    'TIMER_TAGS',
    'DEADLINE_WARNINGS',
    'COMMANDS',
    'pluralize',
    'format_entry',
    'display_prompt',
    'parse_command_args',
    'parse_indexes'
]
