"""
Database-backed game recorder.

Implements the GameRecorder interface on top of the setters. Recording is
best effort: a database failure is logged and the game carries on.
"""

import logging
from typing import Iterable, List, Optional

from game.sinks import GameRecorder
from . import setters

logger = logging.getLogger(__name__)


class DatabaseRecorder(GameRecorder):
    """Records games, rounds, card combos, winners and points with SQLAlchemy."""

    def __init__(self):
        self.game_id: Optional[int] = None
        self.round_id: Optional[int] = None
        self.question_id: Optional[int] = None

    def start_game(self, channel: str):
        try:
            self.game_id = setters.create_game(channel)
        except Exception as e:
            logger.error(f"Failed to record game start: {e}")

    def record_player(self, nick: str):
        try:
            setters.upsert_player(nick, self.game_id)
        except Exception as e:
            logger.error(f"Failed to record player {nick}: {e}")

    def record_round(self, round_number: int, prompt_text: str,
                     active_players: int, total_players: int):
        if self.game_id is None:
            return
        try:
            self.round_id, self.question_id = setters.create_round(
                self.game_id, round_number, prompt_text, active_players, total_players)
        except Exception as e:
            logger.error(f"Failed to record round {round_number}: {e}")

    def record_card_combo(self, nick: str, card_texts: List[str]):
        if self.game_id is None:
            return
        try:
            setters.create_card_combo(self.game_id, nick, self.question_id, card_texts)
        except Exception as e:
            logger.error(f"Failed to record card combo for {nick}: {e}")

    def record_winner(self, round_number: int, nick: str):
        if self.round_id is None:
            return
        try:
            setters.set_round_winner(self.round_id, nick)
        except Exception as e:
            logger.error(f"Failed to record winner of round {round_number}: {e}")

    def record_points(self, players: Iterable):
        if self.game_id is None:
            return
        try:
            setters.update_points(self.game_id, list(players))
        except Exception as e:
            logger.error(f"Failed to record points: {e}")

    def record_game_end(self, round_number: int, limit_reached: bool,
                        winner_nick: Optional[str] = None):
        if self.game_id is None:
            return
        try:
            setters.end_game(self.game_id, round_number, limit_reached, winner_nick)
        except Exception as e:
            logger.error(f"Failed to record game end: {e}")
