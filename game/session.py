"""
Game session for Cards Against Humanity.

A GameSession runs one game in one channel from the first !start until it
stops: it owns the decks, discard piles, the table and every player record,
rotates the czar, deals and recycles cards, runs the round and winner timers
and scores the rounds.

All state changes for a session happen while holding ``session.lock``; timer
callbacks from the ThreadingScheduler take the same lock, so every trigger
runs to completion before the next one is processed.
"""

import logging
import random
import threading
import uuid
from functools import partial
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from config.settings import GameOptions
from utils.constants import DEADLINE_WARNINGS, NOTIFY_EXEMPT_MODES, TIMER_TAGS
from utils.helpers import display_prompt, format_entry, format_time_duration, parse_indexes, pluralize

from . import events as roster
from .cards import CardCollection
from .events import EventHub
from .exceptions import CardCorpusError, IllegalStateError, InvalidIndex, ValidationError
from .models import Card, CardType, GameState, Player
from .scheduler import Scheduler, ThreadingScheduler
from .sinks import GameRecorder, MessageSink, NullRecorder

logger = logging.getLogger(__name__)

Result = Tuple[bool, str]


class GameSession:
    """A single game of Cards Against Humanity running in one channel."""

    def __init__(self, channel: str, cards: Iterable[Any], options: Optional[GameOptions] = None,
                 messenger: Optional[MessageSink] = None, scheduler: Optional[Scheduler] = None,
                 events: Optional[EventHub] = None, recorder: Optional[GameRecorder] = None,
                 point_limit: Optional[int] = None, session_id: Optional[str] = None):
        """
        Set up decks and start the join countdown.

        Args:
            channel: Channel the game runs in
            cards: Card objects or raw card specs for both kinds
            options: Game options, defaults to GameOptions()
            messenger: Where channel and player messages go
            scheduler: Timer scheduler; a ThreadingScheduler bound to this
                session's lock when omitted
            events: Roster event hub to subscribe to
            recorder: Analytics recorder, no-op when omitted
            point_limit: Overrides options.point_limit (from !start arguments)
            session_id: Identifier for logs, random when omitted

        Raises:
            CardCorpusError: If there are no prompt or no response cards
        """
        self.options = options or GameOptions()
        self.channel = channel
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self.messenger = messenger or MessageSink()
        self.recorder = recorder or NullRecorder()
        self.events = events

        if scheduler is None:
            self.lock = threading.RLock()
            self.scheduler = ThreadingScheduler(self.lock)
        else:
            self.scheduler = scheduler
            self.lock = getattr(scheduler, 'lock', None) or threading.RLock()

        all_cards = CardCollection(cards)
        prompts = [c for c in all_cards if c.type is CardType.PROMPT]
        responses = [c for c in all_cards if c.type is CardType.RESPONSE]
        if not prompts or not responses:
            raise CardCorpusError(
                f"Need prompt and response cards, got {len(prompts)} prompts "
                f"and {len(responses)} responses"
            )
        logger.info(f"[{self.session_id}] Loaded {all_cards.size()} cards: "
                    f"{len(prompts)} prompts, {len(responses)} responses")

        self.decks: Dict[CardType, CardCollection] = {
            CardType.PROMPT: CardCollection(prompts),
            CardType.RESPONSE: CardCollection(responses),
        }
        self.discards: Dict[CardType, CardCollection] = {
            CardType.PROMPT: CardCollection(),
            CardType.RESPONSE: CardCollection(),
        }
        self.table: Dict[str, Any] = {'prompt': None, 'submissions': []}
        self.decks[CardType.PROMPT].shuffle()
        self.decks[CardType.RESPONSE].shuffle()

        self.round = 0
        self.players: List[Player] = []
        self.czar: Optional[Player] = None
        self.state = GameState.STARTED
        self.pause_state: Optional[GameState] = None
        self.paused_elapsed = 0.0
        self.round_started: Optional[float] = None
        self.notify_users_pending = False

        self.point_limit = self.options.point_limit
        if point_limit is not None:
            logger.info(f"[{self.session_id}] Point limit set to {point_limit} from arguments")
            self.point_limit = point_limit

        self._handlers = {
            roster.PART: self._on_part,
            roster.QUIT: self._on_quit,
            roster.KICK: self._on_kick,
            roster.NICK: self._on_nick,
            roster.NAMES: self._on_names,
        }

        start_in = self.options.seconds_before_start
        self.say(f"A new game of Cards Against Humanity. The game starts in {start_in} "
                 f"{pluralize('second', start_in)}. Type !join to join the game any time.")

        self.recorder.start_game(self.channel)

        if self.events:
            for event, handler in self._handlers.items():
                self.events.add_listener(event, handler)

        if self.options.notify_users:
            self.notify_users()

        self.start_time = self.scheduler.now()
        self.scheduler.schedule(start_in, TIMER_TAGS['START'], self.next_round)
        logger.info(f"[{self.session_id}] Game created in {channel}, starting in {start_in}s")

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    def say(self, text: str):
        self.messenger.say(self.channel, text)

    def pm(self, nick: str, text: str):
        self.messenger.direct_message(nick, text)

    def notice(self, nick: str, text: str):
        self.messenger.notice(nick, text)

    def _reject(self, player: Optional[Player], error: Exception, private: bool = False) -> Result:
        """Report a player error without touching game state."""
        message = str(error)
        nick = player.nick if player else '?'
        logger.warning(f"[{self.session_id}] Rejected action by {nick}: {message}")
        if private and player:
            self.pm(player.nick, message)
        elif player:
            self.say(f"{player.nick}: {message}")
        else:
            self.say(message)
        return False, message

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def is_stopped(self) -> bool:
        return self.state is GameState.STOPPED

    @property
    def prompt(self) -> Optional[Card]:
        return self.table['prompt'] if not self.is_stopped else None

    @property
    def submissions(self) -> List[CardCollection]:
        return self.table['submissions'] if not self.is_stopped else []

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.is_active]

    def find_by_identity(self, user: str, hostname: str,
                         active: Optional[bool] = None) -> Optional[Player]:
        """Find a player by user and hostname, optionally filtered by active flag."""
        for player in self.players:
            if player.identity == (user, hostname) and (active is None or player.is_active == active):
                return player
        return None

    def find_by_nick(self, nick: str) -> Optional[Player]:
        for player in self.players:
            if player.nick == nick:
                return player
        return None

    def find_by_points(self, points: int) -> Optional[Player]:
        """First player with at least this many points."""
        for player in self.players:
            if player.points >= points:
                return player
        return None

    def czar_present(self) -> bool:
        return self.czar is not None and self.czar.is_active and self.czar.is_czar

    def get_not_played(self) -> List[Player]:
        """
        Active non-czar players holding cards who have not played yet.

        Players without cards (joined mid-round) are ignored.
        """
        return [
            p for p in self.players
            if p.is_active and not p.is_czar and not p.has_played and p.hand.size() > 0
        ]

    def check_all_played(self) -> bool:
        return len(self.get_not_played()) == 0

    def total_cards(self, kind: CardType) -> int:
        """Cards of a kind across deck, discard pile, hands and table."""
        total = self.decks[kind].size() + self.discards[kind].size()
        if kind is CardType.PROMPT:
            total += 1 if self.table['prompt'] is not None else 0
        else:
            total += sum(p.hand.size() for p in self.players)
            total += sum(s.size() for s in self.table['submissions'])
        return total

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _arm_deadline(self, tag: str, remaining: float, on_expire, on_warning):
        self.scheduler.schedule(remaining, tag, on_expire)
        for offset in DEADLINE_WARNINGS:
            if remaining > offset:
                self.scheduler.schedule(remaining - offset, f"{tag}:warning:{offset}",
                                        partial(on_warning, offset))

    def _cancel_deadline(self, tag: str):
        self.scheduler.cancel(tag)
        for offset in DEADLINE_WARNINGS:
            self.scheduler.cancel(f"{tag}:warning:{offset}")

    def _round_warning(self, seconds_left: int):
        if self.state is not GameState.PLAYABLE:
            return
        if seconds_left >= 60:
            self.say('Hurry up, 1 minute left!')
            self.show_status()
        else:
            self.say(f"{seconds_left} seconds left!")

    def _winner_warning(self, seconds_left: int):
        if self.state is not GameState.PLAYED or not self.czar:
            return
        if seconds_left >= 60:
            self.say(f"{self.czar.nick}: Hurry up, 1 minute left!")
        else:
            self.say(f"{self.czar.nick}: {seconds_left} seconds left!")

    def _round_timeout(self):
        if self.state is not GameState.PLAYABLE:
            return
        logger.info(f"[{self.session_id}] Round {self.round} timed out")
        self.say('Time is up!')
        self.mark_inactive_players()
        self.show_entries()

    def _winner_timeout(self):
        if self.state is not GameState.PLAYED:
            return
        logger.info(f"[{self.session_id}] Czar {self.czar.nick} did not pick, selecting winner")
        self.say('Time is up. I will pick the winner on this round.')
        self.czar.inactive_rounds += 1
        self.select_winner(self._random_entry())

    def _lobby_timeout(self):
        if self.state is GameState.WAITING:
            logger.info(f"[{self.session_id}] Not enough players joined, stopping")
            self.stop()

    def _random_entry(self) -> int:
        return random.randrange(len(self.table['submissions'])) if self.table['submissions'] else 0

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def next_round(self) -> bool:
        """Start the next round, or wait/stop if that is not possible."""
        if self.is_stopped:
            return False
        self.scheduler.cancel(TIMER_TAGS['START'])
        self.scheduler.cancel(TIMER_TAGS['LOBBY'])

        if self.point_limit > 0:
            winner = self.find_by_points(self.point_limit)
            if winner:
                self.say(f"{winner.nick} has the limit of {self.point_limit} awesome "
                         f"{pluralize('point', self.point_limit)} and is the winner of the game! "
                         f"Congratulations!")
                self.stop(point_limit_reached=True)
                return False

        if len(self.active_players()) < self.options.min_players:
            wait = self.options.round_seconds
            self.say(f"Not enough players to start a round (need at least {self.options.min_players}). "
                     f"Waiting for others to join. Stopping in {format_time_duration(wait)} "
                     f"if not enough players.")
            self.state = GameState.WAITING
            self.scheduler.schedule(wait, TIMER_TAGS['LOBBY'], self._lobby_timeout)
            return False

        self.recorder.record_points(self.players)
        self.round += 1
        logger.info(f"[{self.session_id}] Starting round {self.round}")

        self.set_czar()
        self.deal()
        self.say(f"Round {self.round}! {self.czar.nick} is the card czar.")
        self.play_prompt()

        for player in self.active_players():
            if not player.is_czar:
                self.show_cards(player)
                self.pm(player.nick, 'Play cards with !pick <card numbers>')

        self.state = GameState.PLAYABLE
        return True

    def set_czar(self) -> Player:
        """Pass the czar role to the next active player after the current czar."""
        if self.czar is None:
            self.czar = self.active_players()[0]
        else:
            start = self.players.index(self.czar)
            count = len(self.players)
            for offset in range(1, count):
                candidate = self.players[(start + offset) % count]
                if candidate.is_active:
                    self.czar = candidate
                    break
            # no other active player: the czar stays

        self.czar.is_czar = True
        logger.info(f"[{self.session_id}] New czar: {self.czar.nick}")
        return self.czar

    def check_decks(self, kind: Optional[CardType] = None):
        """Refill empty decks from their discard piles."""
        kinds = [kind] if kind else list(CardType)
        for card_type in kinds:
            deck = self.decks[card_type]
            if deck.size() == 0 and self.discards[card_type].size() > 0:
                logger.info(f"[{self.session_id}] {card_type.value} deck is empty, reset from discard")
                deck.reset(self.discards[card_type].reset())
                deck.shuffle()

    def draw(self, kind: CardType) -> Optional[Card]:
        """Take the top card of a deck, recycling the discard pile if needed."""
        self.check_decks(kind)
        if self.decks[kind].size() == 0:
            logger.warning(f"[{self.session_id}] No {kind.value} cards left to draw")
            return None
        return self.decks[kind].pick_cards()

    def deal(self, player: Optional[Player] = None, target_size: Optional[int] = None):
        """
        Fill hands with response cards.

        Without arguments every active player is filled up to the hand size.
        With a player only that player is filled, up to target_size or the
        hand size.
        """
        if player is None:
            for target in self.active_players():
                self._fill_hand(target, self.options.hand_size)
        else:
            self._fill_hand(player, self.options.hand_size if target_size is None else target_size)

    def _fill_hand(self, player: Player, size: int):
        needed = size - player.hand.size()
        if needed > 0:
            logger.debug(f"[{self.session_id}] Dealing {needed} cards to {player.nick}")
        while player.hand.size() < size:
            card = self.draw(CardType.RESPONSE)
            if card is None:
                break
            player.hand.add_card(card)

    def play_prompt(self):
        """Reveal a new prompt card and start the round timer."""
        card = self.draw(CardType.PROMPT)
        self.table['prompt'] = card

        value = display_prompt(card.value)
        if card.pick > 1:
            value += f" [PICK {card.pick}]"
        if card.draw > 0:
            value += f" [DRAW {card.draw}]"
        self.say(f"CARD: {value}")

        active = self.active_players()
        self.recorder.record_round(self.round, card.value, len(active), len(self.players))

        for player in active:
            if not player.is_czar:
                self.pm(player.nick, f"CARD: {value}")

        if card.draw > 0:
            for player in active:
                if player.is_czar:
                    continue
                for _ in range(card.draw):
                    drawn = self.draw(CardType.RESPONSE)
                    if drawn is None:
                        break
                    player.hand.add_card(drawn)

        self.round_started = self.scheduler.now()
        self._arm_deadline(TIMER_TAGS['ROUND'], self.options.round_seconds,
                           self._round_timeout, self._round_warning)

    def play_card(self, indexes: Sequence, player: Optional[Player]) -> Result:
        """
        Play response cards from a player's hand onto the table.

        Args:
            indexes: Hand indexes of the cards to play, in blank order
            player: Player playing the cards
        """
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if player is None:
            logger.warning(f"[{self.session_id}] Invalid player tried to play a card")
            return False, 'Invalid player'

        try:
            if self.state is GameState.PAUSED:
                raise IllegalStateError('Game is currently paused.')
            cards = parse_indexes(indexes)
            if self.state is not GameState.PLAYABLE or player.hand.size() == 0 or not player.is_active:
                raise IllegalStateError("Can't play at the moment.")
            if player.is_czar:
                raise IllegalStateError('You are the card czar. The czar does not play. '
                                        'The czar makes other people do their dirty work.')
            if player.has_played:
                raise IllegalStateError('You have already played on this round.')
            pick = self.table['prompt'].pick
            if cards is None or len(cards) != pick:
                raise ValidationError(
                    f"You must pick {'1 card' if pick == 1 else f'{pick} different cards'}."
                )
        except (IllegalStateError, ValidationError) as e:
            return self._reject(player, e)

        try:
            played = player.hand.pick_cards(cards)
        except InvalidIndex as e:
            logger.warning(f"[{self.session_id}] {player.nick}: {e}")
            return self._reject(player, ValidationError('Invalid card index'), private=True)

        played.owner = player
        self.table['submissions'].append(played)
        player.has_played = True
        player.inactive_rounds = 0
        logger.info(f"[{self.session_id}] {player.nick} played cards {cards}")

        texts = [card.value for card in played]
        self.pm(player.nick, f"You played: {format_entry(self.table['prompt'].value, texts)}")
        self.recorder.record_card_combo(player.nick, texts)

        if self.check_all_played():
            self.show_entries()
        return True, 'Cards played'

    def discard(self, indexes: Sequence, player: Optional[Player]) -> Result:
        """
        Swap cards from a player's hand for new ones at the cost of one point.

        An empty index list discards the whole hand. Allowed once per round.
        """
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if player is None:
            logger.warning(f"[{self.session_id}] Invalid player tried to discard cards")
            return False, 'Invalid player'

        try:
            if self.state is GameState.PAUSED:
                raise IllegalStateError('Game is currently paused.')
            if self.state is not GameState.PLAYABLE or player.hand.size() == 0 or not player.is_active:
                raise IllegalStateError("Can't discard at the moment.")
            if player.is_czar:
                raise IllegalStateError('You are the card czar. You cannot discard cards '
                                        'until you are a regular player.')
            if player.has_discarded:
                raise IllegalStateError('You may only discard once per turn.')
            if player.points < 1:
                raise IllegalStateError('You must have at least one awesome point to discard.')
            cards = parse_indexes(indexes)
            if cards is None:
                raise ValidationError('Invalid card index.')
        except (IllegalStateError, ValidationError) as e:
            return self._reject(player, e)

        if not cards:
            cards = list(range(player.hand.size()))

        try:
            discarded = player.hand.pick_cards(cards)
        except InvalidIndex as e:
            logger.warning(f"[{self.session_id}] {player.nick}: {e}")
            return self._reject(player, ValidationError('Invalid card index.'), private=True)

        self.deal(player, player.hand.size() + discarded.size())

        for card in discarded:
            discarded.remove_card(card)
            self.discards[CardType.RESPONSE].add_card(card)

        player.has_discarded = True
        player.spend_point()
        logger.info(f"[{self.session_id}] {player.nick} discarded {len(cards)} cards")

        self.pm(player.nick, f"You have discarded, and have {player.points} "
                             f"{pluralize('point', player.points)} remaining")
        self.show_cards(player)
        return True, 'Cards discarded'

    def show_entries(self):
        """End the playing phase and present the submissions to the czar."""
        if self.is_stopped:
            return
        self._cancel_deadline(TIMER_TAGS['ROUND'])
        self.state = GameState.PLAYED
        submissions = self.table['submissions']

        if not submissions:
            self.say('No one played on this round.')
            self.clean()
            self.next_round()
        elif len(submissions) == 1:
            self.say('Only one player played and is the winner by default.')
            self.select_winner(0)
        else:
            self.say('Everyone has played. Here are the entries:')
            random.shuffle(submissions)
            prompt_text = self.table['prompt'].value
            for i, entry in enumerate(submissions):
                self.say(f"{i}: {format_entry(prompt_text, [c.value for c in entry])}")

            if not self.czar_present():
                self.say('The czar has fled the scene. So I will pick the winner on this round.')
                self.select_winner(self._random_entry())
            else:
                self.say(f"{self.czar.nick}: Select the winner (!winner <entry number>)")
                self.round_started = self.scheduler.now()
                self._arm_deadline(TIMER_TAGS['WINNER'], self.options.round_seconds,
                                   self._winner_timeout, self._winner_warning)

    def select_winner(self, index, player: Optional[Player] = None) -> Result:
        """
        Pick the winning submission.

        Args:
            index: Entry number of the winning submission
            player: Player who issued the command; None for internal calls,
                which skip the czar check
        """
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if self.state is GameState.PAUSED:
            return self._reject(None, IllegalStateError('Game is currently paused.'))
        if self.state is not GameState.PLAYED:
            return False, 'No entries to choose from.'

        if player is not None and player is not self.czar:
            return self._reject(player, IllegalStateError(
                'You are not the card czar. Only the card czar can select the winner'))

        submissions = self.table['submissions']
        try:
            position = int(index)
        except (TypeError, ValueError):
            position = None
        if position is None or not 0 <= position < len(submissions):
            return self._reject(None, ValidationError('Invalid winner'))

        self._cancel_deadline(TIMER_TAGS['WINNER'])
        self.state = GameState.ROUND_END
        winner = submissions[position]
        owner = winner.owner
        owner.award_point()

        entry = format_entry(self.table['prompt'].value, [c.value for c in winner])
        self.say(f"Winner is: {owner.nick} with \"{entry}\" and gets one awesome point! "
                 f"{owner.nick} has {owner.points} awesome {pluralize('point', owner.points)}.")
        logger.info(f"[{self.session_id}] Round {self.round} won by {owner.nick}")
        self.recorder.record_winner(self.round, owner.nick)

        self.clean()
        self.next_round()
        return True, f"{owner.nick} wins the round"

    def clean(self):
        """Clear the table and reset players after a round."""
        if self.is_stopped:
            return
        self.state = GameState.ROUND_END

        if self.table['prompt'] is not None:
            self.discards[CardType.PROMPT].add_card(self.table['prompt'])
            self.table['prompt'] = None
        for submission in self.table['submissions']:
            for card in submission:
                submission.remove_card(card)
                self.discards[CardType.RESPONSE].add_card(card)
        self.table['submissions'] = []

        removed = []
        for player in list(self.players):
            player.reset_round_flags()
            if player.inactive_rounds >= 1:
                player.inactive_rounds = 0
                if player.is_active:
                    player.idle_count += 1
                    removed.append(player.nick)
                    self.remove_player(player, silent=True)
                    if self.is_stopped:
                        return

        if removed:
            self.say(f"Removed inactive {pluralize('player', len(removed))}: {', '.join(removed)}")

        self.state = GameState.STARTED

    def mark_inactive_players(self):
        for player in self.get_not_played():
            player.inactive_rounds += 1

    # ------------------------------------------------------------------
    # Pause / resume / stop
    # ------------------------------------------------------------------

    def pause(self) -> Result:
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if self.state is GameState.PAUSED:
            return self._reject(None, IllegalStateError(
                'Game is already paused. Type !resume to begin playing again.'))
        if self.state not in (GameState.PLAYABLE, GameState.PLAYED):
            return self._reject(None, IllegalStateError('The game cannot be paused right now.'))

        self.pause_state = self.state
        self.paused_elapsed = self.scheduler.now() - (self.round_started or self.scheduler.now())
        self.state = GameState.PAUSED

        self._cancel_deadline(TIMER_TAGS['ROUND'])
        self._cancel_deadline(TIMER_TAGS['WINNER'])
        logger.info(f"[{self.session_id}] Paused in {self.pause_state.value} "
                    f"after {self.paused_elapsed:.1f}s")
        self.say('Game is now paused. Type !resume to begin playing again.')
        return True, 'Game paused'

    def resume(self) -> Result:
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if self.state is not GameState.PAUSED:
            return self._reject(None, IllegalStateError('The game is not paused.'))

        now = self.scheduler.now()
        self.round_started = now - self.paused_elapsed
        self.state = self.pause_state
        self.pause_state = None
        remaining = max(self.options.round_seconds - self.paused_elapsed, 0)

        self.say('Game has been resumed.')
        logger.info(f"[{self.session_id}] Resumed into {self.state.value}, {remaining:.1f}s left")

        if self.state is GameState.PLAYED:
            if not self.czar_present():
                self.say('The czar quit the game during pause. I will pick the winner on this round.')
                self.select_winner(self._random_entry())
            else:
                self._arm_deadline(TIMER_TAGS['WINNER'], remaining,
                                   self._winner_timeout, self._winner_warning)
        elif self.state is GameState.PLAYABLE:
            self._arm_deadline(TIMER_TAGS['ROUND'], remaining,
                               self._round_timeout, self._round_warning)
            if self.table['submissions'] and self.check_all_played():
                self.show_entries()
        return True, 'Game resumed'

    def stop(self, player: Optional[Player] = None, point_limit_reached: bool = False) -> Result:
        """Stop the game for good."""
        if self.is_stopped:
            return False, 'Game has been stopped.'
        self.state = GameState.STOPPED

        if player is not None:
            self.say(f"{player.nick} stopped the game.")
        if self.round > 1:
            self.show_points()

        winner_nick = None
        if point_limit_reached:
            winner = self.find_by_points(self.point_limit)
            winner_nick = winner.nick if winner else None
        else:
            self.say('Game has been stopped.')

        self.recorder.record_game_end(self.round, point_limit_reached, winner_nick)
        self.recorder.record_points(self.players)

        self.scheduler.cancel_all()

        if self.events:
            for event, handler in self._handlers.items():
                self.events.remove_listener(event, handler)

        self.czar = None
        self.decks = {kind: CardCollection() for kind in CardType}
        self.discards = {kind: CardCollection() for kind in CardType}
        self.table = {'prompt': None, 'submissions': []}
        for p in self.players:
            p.is_active = False
            p.hand.reset()

        logger.info(f"[{self.session_id}] Game in {self.channel} stopped after {self.round} rounds")
        return True, 'Game stopped'

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_player(self, player: Player) -> Tuple[bool, str, Optional[Player]]:
        """
        Add a player to the game, or bring back a player who left.

        Returns:
            tuple: (success, message, player_in_game)
        """
        if self.is_stopped:
            return False, 'Game has been stopped.', None

        if self.find_by_identity(player.user, player.hostname, active=True):
            return False, f"{player.nick} is already in the game", None

        active_count = len(self.active_players())
        returning = self.find_by_identity(player.user, player.hostname, active=False)
        if returning:
            if returning.idle_count >= self.options.idle_limit:
                ok, message = self._reject(player, IllegalStateError(
                    'You have idled too much and have been banned from this game.'))
                return ok, message, None
            if active_count >= self.options.max_players:
                ok, message = self._reject(player, IllegalStateError(
                    'You cannot join right now as the maximum number of players have joined the game'))
                return ok, message, None
            returning.rename(player.nick)
            returning.is_active = True
            if self.state in (GameState.PLAYABLE, GameState.PLAYED, GameState.PAUSED):
                returning.has_played = True
            joined = returning
        else:
            if active_count >= self.options.max_players:
                ok, message = self._reject(player, IllegalStateError(
                    'You cannot join right now as the maximum number of players have joined the game'))
                return ok, message, None
            self.players.append(player)
            if self.state in (GameState.PLAYABLE, GameState.PLAYED, GameState.PAUSED):
                player.has_played = True
            joined = player

        self.say(f"{joined.nick} has joined the game")
        logger.info(f"[{self.session_id}] {joined.nick} joined ({len(self.active_players())} active)")
        self.recorder.record_player(joined.nick)

        if (self.state is GameState.WAITING
                and len(self.active_players()) >= self.options.min_players):
            self.next_round()

        return True, f"{joined.nick} joined", joined

    def remove_player(self, player: Optional[Player], silent: bool = False) -> Result:
        """Deactivate a player and return their hand to the discard pile."""
        if self.is_stopped:
            return False, 'Game has been stopped.'
        if player is None or not player.is_active:
            return False, 'Player is not in the game'

        cards = player.hand.reset()
        player.is_active = False
        for card in cards:
            self.discards[CardType.RESPONSE].add_card(card)
        logger.info(f"[{self.session_id}] Removed {player.nick}, {len(cards)} cards to discard")

        if not silent:
            self.say(f"{player.nick} has left the game")

        if not self.active_players():
            self.say('No Players left')
            self.stop()
            return True, f"{player.nick} left"

        if self.state is GameState.PLAYABLE and self.check_all_played():
            self.show_entries()
        elif self.state is GameState.PLAYED and player is self.czar:
            self.say('The czar has fled the scene. So I will pick the winner on this round.')
            self.select_winner(self._random_entry())

        return True, f"{player.nick} left"

    def find_and_remove_if_playing(self, nick: str):
        player = self.find_by_nick(nick)
        if player is not None:
            self.remove_player(player)

    def _on_part(self, channel: str, nick: str):
        if channel == self.channel:
            logger.info(f"[{self.session_id}] Player {nick} left")
            with self.lock:
                self.find_and_remove_if_playing(nick)

    def _on_quit(self, nick: str):
        logger.info(f"[{self.session_id}] Player {nick} quit")
        with self.lock:
            self.find_and_remove_if_playing(nick)

    def _on_kick(self, channel: str, nick: str, by: Optional[str] = None):
        if channel == self.channel:
            logger.info(f"[{self.session_id}] Player {nick} was kicked by {by}")
            with self.lock:
                self.find_and_remove_if_playing(nick)

    def _on_nick(self, old_nick: str, new_nick: str):
        with self.lock:
            player = self.find_by_nick(old_nick)
            if player is not None:
                logger.info(f"[{self.session_id}] Player changed nick from {old_nick} to {new_nick}")
                player.rename(new_nick)
                self.recorder.record_player(new_nick)

    def notify_users(self):
        """Ask for the channel's names; the reply triggers notifications."""
        self.notify_users_pending = True
        self.messenger.request_roster(self.channel)

    def _on_names(self, channel: str, nicks: Dict[str, str]):
        if channel != self.channel:
            return
        with self.lock:
            if not self.notify_users_pending:
                return
            self.notify_users_pending = False
            for nick, mode in nicks.items():
                if mode in NOTIFY_EXEMPT_MODES or nick == self.options.bot_nick:
                    continue
                self.notice(nick, f"{nick}: A new game of Cards Against Humanity just began in "
                                  f"{self.channel}. Head over and !join if you'd like to get in on the fun!")

    # ------------------------------------------------------------------
    # Information
    # ------------------------------------------------------------------

    def show_cards(self, player: Optional[Player]):
        if player is None or self.is_stopped:
            return
        listing = ' '.join(f"[{i}] {card.value}" for i, card in enumerate(player.hand))
        self.pm(player.nick, f"Your cards are: {listing}")

    def show_points(self):
        ranked = sorted(self.players, key=lambda p: -p.points)
        output = ', '.join(f"{p.nick} {p.points} awesome {pluralize('point', p.points)}" for p in ranked)
        self.say(f"The most horrible people: {output}")

    def list_players(self):
        active = self.active_players()
        if active:
            self.say(f"Players currently in the game: {', '.join(p.nick for p in active)}")
        else:
            self.say('No players currently in the game')

    def show_status(self):
        active = self.active_players()
        needed = max(0, self.options.min_players - len(active))

        if self.state is GameState.PLAYABLE:
            waiting = [p.nick for p in active if not p.is_czar and not p.has_played]
            self.say(f"Status: {self.czar.nick} is the czar. Waiting for "
                     f"{pluralize('player', len(waiting))} to play: {', '.join(waiting)}")
        elif self.state is GameState.PLAYED:
            self.say(f"Status: Waiting for {self.czar.nick} to select the winner.")
        elif self.state is GameState.ROUND_END:
            self.say('Status: Round has ended and next one is starting.')
        elif self.state is GameState.STARTED:
            left = max(0, round(self.options.seconds_before_start
                                - (self.scheduler.now() - self.start_time)))
            self.say(f"Status: Game starts in {left} {pluralize('second', left)}. "
                     f"Need {needed} more {pluralize('player', needed)} to start.")
        elif self.state is GameState.STOPPED:
            self.say('Status: Game has been stopped.')
        elif self.state is GameState.WAITING:
            self.say(f"Status: Not enough players to start. Need {needed} more "
                     f"{pluralize('player', needed)} to start.")
        elif self.state is GameState.PAUSED:
            self.say('Status: Game is paused.')

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        prompt = self.prompt
        return {
            'session_id': self.session_id,
            'channel': self.channel,
            'state': self.state.value,
            'round': self.round,
            'point_limit': self.point_limit,
            'czar': self.czar.nick if self.czar else None,
            'prompt': prompt.to_dict() if prompt else None,
            'submissions': len(self.submissions),
            'players': [p.to_dict() for p in self.players]
        }
