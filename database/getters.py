"""
Database Getters for Cards Against Humanity.

Read helpers. Functions taking a ``session`` argument are used inside an
open session by the setters; the others open their own.
"""

import logging
from typing import List, Optional

from .config import get_db_session
from .models import Card, CardCombo, Game, Player, Points, Round

logger = logging.getLogger(__name__)


def get_player_by_nick(session, nick: str) -> Optional[Player]:
    return session.query(Player).filter_by(nick=nick).first()


def get_card_by_text(session, text: str) -> Optional[Card]:
    return session.query(Card).filter_by(text=text).first()


def get_cards_by_text(session, texts: List[str]) -> List[Card]:
    return session.query(Card).filter(Card.text.in_(texts)).all()


def get_points(session, game_id: int, player_id: int) -> Optional[Points]:
    return session.query(Points).filter_by(game_id=game_id, player_id=player_id).first()


def get_game_summary(game_id: int) -> Optional[dict]:
    """Summary of a recorded game for the API."""
    with get_db_session() as session:
        game = session.query(Game).filter_by(id=game_id).first()
        if not game:
            return None
        rounds = session.query(Round).filter_by(game_id=game_id).count()
        combos = session.query(CardCombo).filter_by(game_id=game_id).count()
        return {
            'id': game.id,
            'channel': game.channel,
            'num_rounds': game.num_rounds,
            'rounds_recorded': rounds,
            'card_combos': combos,
            'winner': game.winner.nick if game.winner else None,
            'point_limit_reached': game.point_limit_reached,
            'created_at': game.created_at.isoformat() if game.created_at else None,
            'ended_at': game.ended_at.isoformat() if game.ended_at else None
        }


def get_most_played_cards(limit: int = 10) -> List[dict]:
    with get_db_session() as session:
        cards = session.query(Card).order_by(Card.times_played.desc()).limit(limit).all()
        return [{'text': c.text, 'type': c.type, 'times_played': c.times_played} for c in cards]
