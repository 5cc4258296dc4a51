"""
Outbound collaborators of a game session.

MessageSink delivers text to the channel and to players. GameRecorder
persists game analytics. Both default to doing nothing so a session can run
without a transport or a database.
"""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class MessageSink:
    """Fire-and-forget messaging. Subclasses deliver over a real transport."""

    def say(self, channel: str, text: str):
        pass

    def direct_message(self, nick: str, text: str):
        pass

    def notice(self, nick: str, text: str):
        pass

    def request_roster(self, channel: str):
        """Ask the transport for the channel's name list (answered via a 'names' event)."""
        pass


class LoggingMessageSink(MessageSink):
    """Writes every message to the log. Useful for local runs."""

    def say(self, channel: str, text: str):
        logger.info(f"[{channel}] {text}")

    def direct_message(self, nick: str, text: str):
        logger.info(f"[-> {nick}] {text}")

    def notice(self, nick: str, text: str):
        logger.info(f"[notice -> {nick}] {text}")


class GameRecorder:
    """Analytics recorder. The base class records nothing."""

    def start_game(self, channel: str):
        pass

    def record_player(self, nick: str):
        pass

    def record_round(self, round_number: int, prompt_text: str,
                     active_players: int, total_players: int):
        pass

    def record_card_combo(self, nick: str, card_texts: List[str]):
        pass

    def record_winner(self, round_number: int, nick: str):
        pass

    def record_points(self, players: Iterable):
        pass

    def record_game_end(self, round_number: int, limit_reached: bool,
                        winner_nick: Optional[str] = None):
        pass


NullRecorder = GameRecorder
