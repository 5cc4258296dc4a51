"""
Roster event hub.

The transport layer publishes roster changes (players leaving, being kicked,
changing nick, channel name lists) here, and game sessions subscribe to the
events for their channel while they run.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

# Event names
PART = 'part'      # (channel, nick)
QUIT = 'quit'      # (nick,)
KICK = 'kick'      # (channel, nick, by)
NICK = 'nick'      # (old_nick, new_nick)
NAMES = 'names'    # (channel, {nick: mode})

ROSTER_EVENTS = (PART, QUIT, KICK, NICK, NAMES)


class EventHub:
    """Minimal publish/subscribe for roster events."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)

    def add_listener(self, event: str, handler: Callable):
        self._listeners[event].append(handler)

    def remove_listener(self, event: str, handler: Callable):
        listeners = self._listeners.get(event, [])
        if handler in listeners:
            listeners.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *args):
        """Call every handler subscribed to the event."""
        for handler in list(self._listeners.get(event, [])):
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"Error handling '{event}' event: {e}", exc_info=True)
