"""
Helper utilities for Cards Against Humanity.

This module contains utility functions used throughout the application
for text formatting and command argument parsing.
"""

import re
from typing import List, Optional, Sequence

_ARG_PATTERN = re.compile(r'(\w+)\s?')


def pluralize(word: str, count: int, plural: Optional[str] = None) -> str:
    """
    Return the singular or plural form of a word for a count.

    Args:
        word: Singular form
        count: How many
        plural: Irregular plural form, defaults to word + 's'
    """
    if count == 1:
        return word
    return plural or f"{word}s"


def format_entry(prompt_text: str, answers: Sequence[str]) -> str:
    """
    Fill a prompt's blanks (%s) with answers.

    Answers beyond the number of blanks are appended, separated by spaces.
    """
    parts = prompt_text.split('%s')
    result = parts[0]
    answers = list(answers)
    for i, part in enumerate(parts[1:]):
        result += (answers[i] if i < len(answers) else '%s') + part
    extra = answers[len(parts) - 1:]
    if extra:
        result = ' '.join([result] + extra)
    return result


def display_prompt(prompt_text: str) -> str:
    """Prompt text with blanks rendered as underscores."""
    return prompt_text.replace('%s', '___')


def parse_command_args(raw: str) -> List[str]:
    """Split a command argument string into words."""
    if not raw:
        return []
    return [arg.strip() for arg in _ARG_PATTERN.findall(raw)]


def parse_indexes(args: Sequence) -> Optional[List[int]]:
    """
    Convert command arguments to card indexes.

    Returns:
        List of ints with duplicates removed (first occurrence kept),
        or None if any argument is not a number
    """
    indexes = []
    for arg in args:
        try:
            index = int(arg)
        except (TypeError, ValueError):
            return None
        if index not in indexes:
            indexes.append(index)
    return indexes


def format_time_duration(seconds: int) -> str:
    """
    Format a duration in seconds to a human-readable string.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        minutes = seconds // 60
        remaining_seconds = seconds % 60
        if remaining_seconds == 0:
            return f"{minutes}m"
        return f"{minutes}m {remaining_seconds}s"
    else:
        hours = seconds // 3600
        remaining_minutes = (seconds % 3600) // 60
        if remaining_minutes == 0:
            return f"{hours}h"
        return f"{hours}h {remaining_minutes}m"
