"""
Pytest fixtures for Cards Against Humanity tests.
"""

import threading
from typing import Callable, Dict, List, Tuple

import pytest

from config.settings import GameOptions
from game import EventHub, GameSession, MessageSink, Player
from game.scheduler import Scheduler


class FakeScheduler(Scheduler):
    """Scheduler with a manual clock. Timers only fire on advance() or fire()."""

    def __init__(self):
        self.lock = threading.RLock()
        self.clock = 0.0
        self._seq = 0
        self.timers: Dict[str, Tuple[float, int, Callable]] = {}

    def now(self) -> float:
        return self.clock

    def schedule(self, duration, tag, callback):
        self._seq += 1
        self.timers[tag] = (self.clock + max(duration, 0), self._seq, callback)

    def cancel(self, tag):
        return self.timers.pop(tag, None) is not None

    def cancel_all(self):
        self.timers.clear()

    def pending(self):
        return list(self.timers)

    def due_in(self, tag):
        return self.timers[tag][0] - self.clock

    def advance(self, seconds):
        """Move the clock forward, firing due timers in order."""
        target = self.clock + seconds
        while True:
            due = [(when, seq, tag) for tag, (when, seq, _) in self.timers.items() if when <= target]
            if not due:
                break
            when, _, tag = min(due)
            self.clock = when
            _, _, callback = self.timers.pop(tag)
            callback()
        self.clock = target

    def fire(self, tag):
        """Run a pending timer now."""
        _, _, callback = self.timers.pop(tag)
        callback()


class RecordingMessenger(MessageSink):
    """Keeps every outbound message for assertions."""

    def __init__(self):
        self.said: List[Tuple[str, str]] = []
        self.direct: List[Tuple[str, str]] = []
        self.notices: List[Tuple[str, str]] = []
        self.roster_requests: List[str] = []

    def say(self, channel, text):
        self.said.append((channel, text))

    def direct_message(self, nick, text):
        self.direct.append((nick, text))

    def notice(self, nick, text):
        self.notices.append((nick, text))

    def request_roster(self, channel):
        self.roster_requests.append(channel)

    def channel_text(self) -> str:
        return '\n'.join(text for _, text in self.said)

    def messages_to(self, nick) -> List[str]:
        return [text for to, text in self.direct if to == nick]


def make_specs(prompts=20, responses=100, pick=1, draw=0):
    """Build a corpus of raw card specs."""
    specs = [{'type': 'Question', 'value': f"Prompt {i}: %s.", 'pick': pick, 'draw': draw}
             for i in range(prompts)]
    specs += [{'type': 'Answer', 'value': f"Response {i}"} for i in range(responses)]
    return specs


def make_player(name, host='example.org'):
    return Player(name, f"~{name}", host)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def events():
    return EventHub()


@pytest.fixture
def options():
    return GameOptions(seconds_before_start=30, round_minutes=3)


@pytest.fixture
def card_specs():
    return make_specs()


@pytest.fixture
def make_session(scheduler, messenger, events, options, card_specs):
    """Factory for sessions wired to the fake scheduler and recording messenger."""
    def factory(cards=None, **kwargs):
        kwargs.setdefault('options', options)
        kwargs.setdefault('messenger', messenger)
        kwargs.setdefault('scheduler', scheduler)
        kwargs.setdefault('events', events)
        return GameSession('#cah', card_specs if cards is None else cards, **kwargs)
    return factory


@pytest.fixture
def session(make_session):
    return make_session()


@pytest.fixture
def players():
    return [make_player('alice'), make_player('bob'), make_player('carol')]


@pytest.fixture
def playing_session(session, scheduler, players):
    """A session with three players in the first round (Playable)."""
    for player in players:
        session.add_player(player)
    scheduler.advance(session.options.seconds_before_start)
    return session


def non_czar(session) -> List[Player]:
    return [p for p in session.active_players() if not p.is_czar]


def play_all(session):
    """Every non-czar player plays their first card(s)."""
    for player in non_czar(session):
        session.play_card(list(range(session.prompt.pick)), player)
