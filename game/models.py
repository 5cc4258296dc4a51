"""
Data models for the card game.

Card is an immutable value object. Player is the mutable per-participant
record a session keeps for the lifetime of the game.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .cards import CardCollection

_player_ids = itertools.count(1)


class GameState(Enum):
    """Game state enumeration."""
    STARTED = "Started"
    WAITING = "Waiting"
    PLAYABLE = "Playable"
    PLAYED = "Played"
    ROUND_END = "RoundEnd"
    PAUSED = "Paused"
    STOPPED = "Stopped"


class CardType(Enum):
    """Kind of card."""
    PROMPT = "prompt"
    RESPONSE = "response"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional['CardType']:
        """Map a corpus kind name onto a CardType, None if unknown."""
        if not raw:
            return None
        raw = str(raw).strip().lower()
        if raw in ('question', 'prompt', 'black'):
            return cls.PROMPT
        if raw in ('answer', 'response', 'white'):
            return cls.RESPONSE
        return None


@dataclass(frozen=True)
class Card:
    """A single prompt or response card."""
    id: str
    type: CardType
    value: str
    pick: int = 0
    draw: int = 0

    @classmethod
    def from_spec(cls, spec: Dict[str, Any], card_id: str) -> 'Card':
        """
        Build a card from a raw corpus entry.

        Args:
            spec: Dict with 'type', 'value' (or 'text'), optional 'pick' and 'draw'
            card_id: Opaque id used when the spec does not carry its own

        Raises:
            ValueError: If the spec has no text or an unknown type
        """
        value = spec.get('value') or spec.get('text')
        if not value:
            raise ValueError("card spec has no text")
        card_type = CardType.parse(spec.get('type'))
        if card_type is None:
            raise ValueError(f"unknown card type {spec.get('type')!r}")

        pick = int(spec.get('pick') or 0)
        draw = int(spec.get('draw') or 0)
        if card_type is CardType.PROMPT:
            pick = max(pick, 1)
        else:
            pick, draw = 0, 0

        return cls(
            id=str(spec.get('id') or card_id),
            type=card_type,
            value=value,
            pick=pick,
            draw=max(draw, 0),
        )

    @property
    def is_prompt(self) -> bool:
        return self.type is CardType.PROMPT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'type': self.type.value,
            'value': self.value,
            'pick': self.pick,
            'draw': self.draw
        }


@dataclass(eq=False)
class Player:
    """A participant in a game session."""
    nick: str
    user: str
    hostname: str
    hand: 'CardCollection' = None
    id: int = field(default_factory=lambda: next(_player_ids))
    has_played: bool = False
    has_discarded: bool = False
    is_czar: bool = False
    is_active: bool = True
    idle_count: int = 0
    inactive_rounds: int = 0
    points: int = 0

    def __post_init__(self):
        if self.hand is None:
            from .cards import CardCollection
            self.hand = CardCollection()

    @property
    def identity(self) -> Tuple[str, str]:
        """Stable identity key, survives nick changes."""
        return self.user, self.hostname

    def rename(self, nick: str):
        self.nick = nick

    def reset_round_flags(self):
        """Clear the per-round flags."""
        self.has_played = False
        self.has_discarded = False
        self.is_czar = False

    def award_point(self) -> int:
        self.points += 1
        return self.points

    def spend_point(self) -> int:
        """Deduct a point, never going below zero."""
        self.points = max(self.points - 1, 0)
        return self.points

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'nick': self.nick,
            'points': self.points,
            'is_czar': self.is_czar,
            'is_active': self.is_active,
            'has_played': self.has_played,
            'cards': self.hand.size()
        }

    def __repr__(self):
        return f"<Player(nick='{self.nick}', points={self.points}, active={self.is_active})>"
