"""
Timer scheduling for game sessions.

Every session owns one scheduler. Timers are identified by a tag; scheduling
a tag that is already pending cancels the previous timer first, so each timer
purpose (start countdown, lobby timeout, round deadline, winner deadline and
their warnings) has at most one pending timer.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Interface for tagged one-shot timers."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on the scheduler's clock."""

    @abstractmethod
    def schedule(self, duration: float, tag: str, callback: Callable[[], None]):
        pass

    @abstractmethod
    def cancel(self, tag: str) -> bool:
        pass

    @abstractmethod
    def cancel_all(self):
        pass

    @abstractmethod
    def pending(self) -> List[str]:
        """Tags of timers that have not fired or been cancelled."""

    def is_scheduled(self, tag: str) -> bool:
        return tag in self.pending()


class ThreadingScheduler(Scheduler):
    """
    Scheduler backed by threading.Timer.

    Callbacks run on the timer thread while holding the session lock, so a
    timer firing never interleaves with a player command on the same session.
    """

    def __init__(self, lock: Optional[threading.RLock] = None):
        self.lock = lock or threading.RLock()
        self._timers: Dict[str, threading.Timer] = {}
        self._guard = threading.Lock()

    def now(self) -> float:
        return time.monotonic()

    def schedule(self, duration: float, tag: str, callback: Callable[[], None]):
        self.cancel(tag)

        timer = threading.Timer(max(duration, 0), self._fire, args=[tag, callback])
        timer.daemon = True
        with self._guard:
            self._timers[tag] = timer
        timer.start()
        logger.debug(f"Scheduled timer '{tag}' in {duration:.1f}s")

    def _fire(self, tag: str, callback: Callable[[], None]):
        # The session lock is taken before the check so a command holding it
        # can still cancel or reschedule this tag.
        with self.lock:
            with self._guard:
                timer = self._timers.get(tag)
                if timer is not threading.current_thread():
                    # Cancelled or rescheduled after this timer started firing
                    return
                del self._timers[tag]

            try:
                callback()
            except Exception as e:
                logger.error(f"Error in timer '{tag}': {e}", exc_info=True)

    def cancel(self, tag: str) -> bool:
        with self._guard:
            timer = self._timers.pop(tag, None)
        if timer:
            timer.cancel()
            logger.debug(f"Cancelled timer '{tag}'")
            return True
        return False

    def cancel_all(self):
        with self._guard:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug(f"Cancelled {len(timers)} timers")

    def pending(self) -> List[str]:
        with self._guard:
            return list(self._timers)
