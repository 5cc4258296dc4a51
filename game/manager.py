"""
Game Manager for Cards Against Humanity.

Command layer between the chat transport and the game sessions. Each chat
command (!start, !join, !pick, ...) is routed to the session running in the
channel it was sent from. The manager holds no game rules of its own.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from config.settings import GameOptions
from utils.constants import COMMANDS, NO_GAME_MESSAGE
from utils.helpers import parse_command_args

from .events import EventHub
from .exceptions import CardCorpusError
from .models import GameState, Player
from .registry import SessionRegistry
from .scheduler import Scheduler
from .session import GameSession
from .sinks import GameRecorder, LoggingMessageSink, MessageSink, NullRecorder

logger = logging.getLogger(__name__)

Result = Tuple[bool, str]


class GameManager:
    """Routes chat commands to the game session of a channel."""

    def __init__(self, cards: Sequence[Any], options: Optional[GameOptions] = None,
                 messenger: Optional[MessageSink] = None, events: Optional[EventHub] = None,
                 registry: Optional[SessionRegistry] = None,
                 recorder_factory: Optional[Callable[[], GameRecorder]] = None,
                 scheduler_factory: Optional[Callable[[], Scheduler]] = None):
        """
        Args:
            cards: Card specs every new game is dealt from
            options: Default game options
            messenger: Transport used by sessions and for command replies
            events: Roster event hub sessions subscribe to
            registry: Channel -> session registry
            recorder_factory: Builds the analytics recorder for a new game
            scheduler_factory: Builds the timer scheduler for a new game
        """
        self.card_specs = list(cards)
        self.options = options or GameOptions()
        self.messenger = messenger or LoggingMessageSink()
        self.events = events or EventHub()
        self.registry = registry or SessionRegistry()
        self.recorder_factory = recorder_factory or NullRecorder
        self.scheduler_factory = scheduler_factory

    def get_game(self, channel: str) -> Optional[GameSession]:
        return self.registry.get(channel)

    def dispatch(self, command: str, channel: str, nick: str, user: str, hostname: str,
                 raw_args: str = '') -> Result:
        """
        Run a chat command.

        Args:
            command: Command name without the leading '!'
            channel: Channel the command was sent in
            nick, user, hostname: Sender identity
            raw_args: Everything after the command name
        """
        command = (command or '').lower().lstrip('!')
        if command not in COMMANDS:
            return False, f"Unknown command '{command}'"
        handler = getattr(self, command)
        args = parse_command_args(raw_args)
        logger.debug(f"{nick} in {channel}: !{command} {args}")
        return handler(channel, nick, user, hostname, args)

    def _no_game(self, channel: str) -> Result:
        self.messenger.say(channel, NO_GAME_MESSAGE)
        return False, NO_GAME_MESSAGE

    def _player(self, game: GameSession, user: str, hostname: str) -> Optional[Player]:
        return game.find_by_identity(user, hostname, active=True)

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    def _new_game(self, channel: str, point_limit: Optional[int]) -> GameSession:
        return GameSession(
            channel,
            self.card_specs,
            options=self.options,
            messenger=self.messenger,
            scheduler=self.scheduler_factory() if self.scheduler_factory else None,
            events=self.events,
            recorder=self.recorder_factory(),
            point_limit=point_limit,
        )

    def _get_or_start(self, channel: str,
                      args: List[str]) -> Tuple[Optional[GameSession], bool]:
        """
        Running game of a channel, starting one if there is none.

        Returns:
            tuple: (game, created); game is None if no game could be started
        """
        point_limit = None
        if args and args[0].isdigit():
            point_limit = int(args[0])

        try:
            return self.registry.get_or_create(channel, lambda: self._new_game(channel, point_limit))
        except CardCorpusError as e:
            logger.error(f"Cannot start a game in {channel}: {e}")
            self.messenger.say(channel, 'Cannot start a game: no cards are loaded.')
            return None, False

    def start(self, channel: str, nick: str, user: str, hostname: str,
              args: List[str]) -> Result:
        game, created = self._get_or_start(channel, args)
        if game is None:
            return False, 'Cannot start a game: no cards are loaded.'
        if not created:
            message = 'A game is already running. Type !join to join the game.'
            self.messenger.say(channel, message)
            return False, message

        with game.lock:
            game.add_player(Player(nick, user, hostname))
        return True, 'Game started'

    def stop(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if player is None:
                return False, 'Only players can stop the game'
            result = game.stop(player)
        self.registry.remove(channel)
        return result

    def pause(self, channel: str, nick: str, user: str, hostname: str,
              args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            if self._player(game, user, hostname) is None:
                return False, 'Only players can pause the game'
            return game.pause()

    def resume(self, channel: str, nick: str, user: str, hostname: str,
               args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            if self._player(game, user, hostname) is None:
                return False, 'Only players can resume the game'
            return game.resume()

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def join(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        game, created = self._get_or_start(channel, args)
        if game is None:
            return False, 'Cannot start a game: no cards are loaded.'
        with game.lock:
            success, message, _ = game.add_player(Player(nick, user, hostname))
        if created:
            return True, 'Game started'
        return success, message

    def quit(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            return game.remove_player(self._player(game, user, hostname))

    def list(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            game.list_players()
        return True, 'Listed players'

    # ------------------------------------------------------------------
    # Playing
    # ------------------------------------------------------------------

    def cards(self, channel: str, nick: str, user: str, hostname: str,
              args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if player is None:
                return False, 'Not in the game'
            game.show_cards(player)
        return True, 'Cards shown'

    def play(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if player is None:
                return False, 'Not in the game'
            return game.play_card(args, player)

    def winner(self, channel: str, nick: str, user: str, hostname: str,
               args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if player is None:
                return False, 'Not in the game'
            return game.select_winner(args[0] if args else None, player)

    def pick(self, channel: str, nick: str, user: str, hostname: str,
             args: List[str]) -> Result:
        """Select the winner when czar during judging, otherwise play cards."""
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if player is None:
                return False, 'Not in the game'
            if game.state is GameState.PLAYED and channel == game.channel:
                return game.select_winner(args[0] if args else None, player)
            if game.state is GameState.PLAYABLE:
                return game.play_card(args, player)
        message = '!pick command not available in current state.'
        self.messenger.say(channel, message)
        return False, message

    def discard(self, channel: str, nick: str, user: str, hostname: str,
                args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            player = self._player(game, user, hostname)
            if game.state is GameState.PLAYABLE:
                return game.discard(args, player)
        message = '!discard command not available in current state'
        self.messenger.say(channel, message)
        return False, message

    # ------------------------------------------------------------------
    # Information
    # ------------------------------------------------------------------

    def points(self, channel: str, nick: str, user: str, hostname: str,
               args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            game.show_points()
        return True, 'Points shown'

    def status(self, channel: str, nick: str, user: str, hostname: str,
               args: List[str]) -> Result:
        game = self.get_game(channel)
        if game is None:
            return self._no_game(channel)
        with game.lock:
            game.show_status()
        return True, 'Status shown'

    def stop_all(self):
        """Stop every running game (server shutdown)."""
        for channel in self.registry.channels():
            game = self.registry.remove(channel)
            if game is not None:
                with game.lock:
                    game.stop()
