"""
Universal Database Setters for Cards Against Humanity.

Contains all write operations to the database. All session management
is contained within this module - other modules should never handle sessions directly.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from datetime import datetime, timezone

from game.models import CardType
from .config import get_db_session
from .getters import get_card_by_text, get_cards_by_text, get_player_by_nick, get_points
from .models import Card, CardCombo, Game, Player, Points, Round

logger = logging.getLogger(__name__)

# ==============================================================================
# UNIVERSAL SETTERS - ALL WRITE OPERATIONS
# ==============================================================================


def seed_cards(specs: Iterable[Dict[str, Any]]) -> int:
    """Insert corpus cards that are not in the database yet."""
    added = 0
    with get_db_session() as session:
        for spec in specs:
            text = spec.get('value') or spec.get('text')
            card_type = CardType.parse(spec.get('type'))
            if not text or card_type is None:
                continue
            if get_card_by_text(session, text):
                continue
            session.add(Card(
                text=text,
                type=card_type.value,
                pick=int(spec.get('pick') or 0),
                draw=int(spec.get('draw') or 0)
            ))
            added += 1
    logger.info(f"Seeded {added} cards")
    return added


def create_game(channel: str) -> int:
    """Create a new game record."""
    with get_db_session() as session:
        game = Game(channel=channel, num_rounds=0)
        session.add(game)
        session.flush()  # Get the ID without committing
        logger.info(f"Created game {game.id} for {channel}")
        return game.id


def upsert_player(nick: str, game_id: Optional[int] = None) -> int:
    """Create a player by nick, or update its last game."""
    with get_db_session() as session:
        player = get_player_by_nick(session, nick)
        if not player:
            player = Player(nick=nick)
            session.add(player)
        player.last_game_id = game_id
        session.flush()
        return player.id


def create_round(game_id: int, round_number: int, prompt_text: str,
                 active_players: int, total_players: int) -> Tuple[int, Optional[int]]:
    """
    Record a round and bump the prompt's play count.

    Returns:
        tuple: (round_id, question_card_id)
    """
    with get_db_session() as session:
        card = get_card_by_text(session, prompt_text)
        if card:
            card.times_played = (card.times_played or 0) + 1

        game = session.query(Game).filter_by(id=game_id).first()
        if game:
            game.num_rounds = round_number

        game_round = Round(
            game_id=game_id,
            round_number=round_number,
            num_active_players=active_players,
            total_players=total_players,
            question_id=card.id if card else None
        )
        session.add(game_round)
        session.flush()
        logger.info(f"Recorded round {round_number} of game {game_id}")
        return game_round.id, game_round.question_id


def create_card_combo(game_id: int, nick: str, question_id: Optional[int],
                      card_texts: List[str]) -> Optional[int]:
    """Record the cards a player played and bump their play counts."""
    with get_db_session() as session:
        player = get_player_by_nick(session, nick)
        if not player:
            logger.warning(f"No player record for {nick}, card combo not recorded")
            return None

        cards = {card.text: card for card in get_cards_by_text(session, card_texts)}
        ids = [str(cards[text].id) for text in card_texts if text in cards]
        for card in cards.values():
            card.times_played = (card.times_played or 0) + 1

        combo = session.query(CardCombo).filter_by(
            game_id=game_id, player_id=player.id, question_id=question_id).first()
        if combo is None:
            combo = CardCombo(
                game_id=game_id,
                player_id=player.id,
                question_id=question_id,
                answer_ids=','.join(ids),
                winner=False
            )
            session.add(combo)
        session.flush()
        return combo.id


def set_round_winner(round_id: int, nick: str):
    with get_db_session() as session:
        game_round = session.query(Round).filter_by(id=round_id).first()
        player = get_player_by_nick(session, nick)
        if game_round and player:
            game_round.winner_id = player.id
            combo = session.query(CardCombo).filter_by(
                game_id=game_round.game_id, player_id=player.id,
                question_id=game_round.question_id).first()
            if combo:
                combo.winner = True
            logger.info(f"Recorded {nick} as winner of round {game_round.round_number}")


def update_points(game_id: int, players: Iterable) -> int:
    """Create or update the points row of every player in a game."""
    updated = 0
    with get_db_session() as session:
        for p in players:
            player = get_player_by_nick(session, p.nick)
            if not player:
                continue
            row = get_points(session, game_id, player.id)
            if row is None:
                row = Points(game_id=game_id, player_id=player.id)
                session.add(row)
            row.points = p.points
            row.is_active = p.is_active
            updated += 1
    return updated


def end_game(game_id: int, num_rounds: int, limit_reached: bool,
             winner_nick: Optional[str] = None):
    with get_db_session() as session:
        game = session.query(Game).filter_by(id=game_id).first()
        if not game:
            raise ValueError(f"Game {game_id} not found")
        game.ended_at = datetime.now(timezone.utc)
        game.num_rounds = num_rounds
        game.point_limit_reached = limit_reached
        if winner_nick:
            winner = get_player_by_nick(session, winner_nick)
            game.winner_id = winner.id if winner else None
        logger.info(f"Game {game_id} ended after {num_rounds} rounds")
