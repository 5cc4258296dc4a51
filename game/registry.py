"""
Registry of running game sessions, one per channel.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from .session import GameSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Holds the live GameSession of every channel."""

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def get(self, channel: str) -> Optional[GameSession]:
        """Running session for a channel; stopped sessions are dropped."""
        with self._lock:
            session = self._sessions.get(channel)
            if session is not None and session.is_stopped:
                del self._sessions[channel]
                logger.debug(f"Dropped stopped session {session.session_id} for {channel}")
                return None
            return session

    def get_or_create(self, channel: str,
                      factory: Callable[[], GameSession]) -> Tuple[GameSession, bool]:
        """
        Running session for a channel, building one with factory if there is none.

        The lookup and the build happen under the registry lock, so concurrent
        callers for the same channel always share one session.

        Returns:
            tuple: (session, created)
        """
        with self._lock:
            existing = self._sessions.get(channel)
            if existing is not None and not existing.is_stopped:
                return existing, False
            session = factory()
            self._sessions[channel] = session
            logger.info(f"Registered session {session.session_id} for {channel}")
            return session, True

    def remove(self, channel: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.pop(channel, None)

    def channels(self) -> List[str]:
        with self._lock:
            return [c for c, s in self._sessions.items() if not s.is_stopped]

    def __len__(self) -> int:
        return len(self.channels())
