"""
Tests for joining, leaving and roster events.
"""

from config.settings import GameOptions
from game import CardType, GameState, Player
from game import events as roster

from conftest import RecordingMessenger, make_player, non_czar


def test_join_announces_player(session, messenger):
    success, message, player = session.add_player(make_player('alice'))

    assert success
    assert message == 'alice joined'
    assert player.nick == 'alice'
    assert 'alice has joined the game' in messenger.channel_text()


def test_cannot_join_twice(session):
    session.add_player(make_player('alice'))

    success, message, _ = session.add_player(Player('alice2', '~alice', 'example.org'))

    assert not success
    assert message == 'alice2 is already in the game'
    assert len(session.players) == 1


def test_max_players(make_session):
    session = make_session(options=GameOptions(max_players=2))
    session.add_player(make_player('alice'))
    session.add_player(make_player('bob'))

    success, message, _ = session.add_player(make_player('carol'))

    assert not success
    assert 'maximum number of players' in message
    assert len(session.active_players()) == 2


def test_waiting_game_starts_when_enough_join(session, scheduler, messenger):
    """Test a waiting game starts its round as soon as enough players joined."""
    session.add_player(make_player('alice'))
    scheduler.advance(30)

    assert session.state is GameState.WAITING
    assert 'Not enough players to start a round' in messenger.channel_text()
    assert 'lobby' in scheduler.pending()

    session.add_player(make_player('bob'))
    session.add_player(make_player('carol'))

    assert session.state is GameState.PLAYABLE
    assert 'lobby' not in scheduler.pending()


def test_waiting_game_stops_after_timeout(session, scheduler):
    session.add_player(make_player('alice'))
    scheduler.advance(30)

    scheduler.advance(180)

    assert session.state is GameState.STOPPED


def test_leaving_returns_hand_to_discard(playing_session):
    session = playing_session
    player = non_czar(session)[0]
    hand = player.hand.get_cards()

    assert session.remove_player(player) == (True, f"{player.nick} left")

    assert not player.is_active
    assert player.hand.size() == 0
    assert all(card in session.discards[CardType.RESPONSE] for card in hand)


def test_rejoin_keeps_points(playing_session, messenger):
    """Test a returning player keeps their record and may use a new nick."""
    session = playing_session
    player = non_czar(session)[0]
    player.points = 3
    session.remove_player(player)

    success, _, joined = session.add_player(Player('newnick', player.user, player.hostname))

    assert success
    assert joined is player
    assert player.nick == 'newnick'
    assert player.points == 3
    assert player.has_played
    assert len(session.players) == 3


def test_idle_player_is_banned(playing_session):
    session = playing_session
    player = non_czar(session)[0]
    player.idle_count = session.options.idle_limit
    session.remove_player(player)

    success, message, _ = session.add_player(Player(player.nick, player.user, player.hostname))

    assert not success
    assert message == 'You have idled too much and have been banned from this game.'
    assert not player.is_active


def test_last_submitter_leaving_shows_entries(make_session, scheduler):
    """Test judging starts when the only player still to play leaves."""
    session = make_session()
    players = [make_player(name) for name in ('alice', 'bob', 'carol', 'dave')]
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    bob, carol, dave = non_czar(session)
    session.play_card([0], bob)
    session.play_card([0], carol)

    session.remove_player(dave)

    assert session.state is GameState.PLAYED


def test_czar_leaving_while_judging_picks_winner(make_session, scheduler):
    session = make_session()
    players = [make_player(name) for name in ('alice', 'bob', 'carol', 'dave')]
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    czar = session.czar
    for player in non_czar(session):
        session.play_card([0], player)

    session.remove_player(czar)

    assert 'The czar has fled the scene' in session.messenger.channel_text()
    assert sum(p.points for p in session.players) == 1
    assert session.round == 2
    assert session.czar is not czar


def test_part_event_removes_player(playing_session, events):
    player = non_czar(playing_session)[0]

    events.emit(roster.PART, '#other', player.nick)
    assert player.is_active

    events.emit(roster.PART, '#cah', player.nick)
    assert not player.is_active


def test_quit_and_kick_events(playing_session, events):
    first, second = non_czar(playing_session)

    events.emit(roster.QUIT, first.nick)
    events.emit(roster.KICK, '#cah', second.nick, 'op')

    assert not first.is_active
    assert not second.is_active


def test_nick_event_renames_player(playing_session, events):
    player = non_czar(playing_session)[0]

    events.emit(roster.NICK, player.nick, 'renamed')

    assert player.nick == 'renamed'
    assert playing_session.find_by_nick('renamed') is player


def test_events_ignored_after_stop(playing_session, events):
    player = non_czar(playing_session)[0]
    playing_session.stop()

    events.emit(roster.NICK, player.nick, 'renamed')

    assert player.nick != 'renamed'
    assert events.listener_count(roster.QUIT) == 0


def test_notify_users_skips_exempt_modes(make_session, messenger, events):
    """Test new game notices go to regular users only."""
    session = make_session(options=GameOptions(notify_users=True, bot_nick='cahbot'))
    assert messenger.roster_requests == ['#cah']

    events.emit(roster.NAMES, '#cah', {'alice': '', 'bob': '+', 'owner': '~', 'admin': '&', 'cahbot': '@'})

    assert sorted(nick for nick, _ in messenger.notices) == ['alice', 'bob']
    assert 'Head over and !join' in messenger.notices[0][1]

    # only the first names reply after the game started is used
    events.emit(roster.NAMES, '#cah', {'carol': ''})
    assert len(messenger.notices) == 2
    assert session.notify_users_pending is False


class ImmediateRosterMessenger(RecordingMessenger):
    """Answers a names request before request_roster returns."""

    def __init__(self, events, names):
        super().__init__()
        self.events = events
        self.names = names

    def request_roster(self, channel):
        super().request_roster(channel)
        self.events.emit(roster.NAMES, channel, self.names)


def test_notify_users_with_immediate_names_reply(make_session, events):
    """Test a names reply sent during game creation still notifies users."""
    messenger = ImmediateRosterMessenger(events, {'dave': '', 'erin': '+'})

    session = make_session(options=GameOptions(notify_users=True), messenger=messenger)

    assert sorted(nick for nick, _ in messenger.notices) == ['dave', 'erin']
    assert session.notify_users_pending is False
