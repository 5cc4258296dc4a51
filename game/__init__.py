"""
Game Module for Cards Against Humanity.

Contains all game-specific logic and components.
A GameSession runs one game per channel; the GameManager routes chat
commands to the right session.
"""

from .models import Card, CardType, GameState, Player
from .cards import CardCollection
from .exceptions import GameError, ValidationError, InvalidIndex, IllegalStateError, CardCorpusError
from .scheduler import Scheduler, ThreadingScheduler
from .events import EventHub
from .sinks import MessageSink, LoggingMessageSink, GameRecorder, NullRecorder
from .session import GameSession
from .registry import SessionRegistry
from .manager import GameManager
from .corpus import load_cards, validate_corpus

__all__ = [
    # Data models
    'Card',
    'CardType',
    'GameState',
    'Player',
    'CardCollection',

    # Errors
    'GameError',
    'ValidationError',
    'InvalidIndex',
    'IllegalStateError',
    'CardCorpusError',

    # Collaborators
    'Scheduler',
    'ThreadingScheduler',
    'EventHub',
    'MessageSink',
    'LoggingMessageSink',
    'GameRecorder',
    'NullRecorder',

    # Sessions
    'GameSession',
    'SessionRegistry',
    'GameManager',
    'load_cards',
    'validate_corpus'
]
