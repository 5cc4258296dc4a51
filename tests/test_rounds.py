"""
Tests for czar rotation, dealing and card recycling across rounds.
"""

from game import CardType, GameState

from conftest import make_player, make_specs, non_czar, play_all


def play_round(session):
    play_all(session)
    session.select_winner(0, session.czar)


def test_czar_rotates_through_every_player(make_session, scheduler):
    """Czar rotation visits every active player before repeating."""
    session = make_session()
    players = [make_player(name) for name in ('alice', 'bob', 'carol', 'dave')]
    for player in players:
        session.add_player(player)
    scheduler.advance(30)

    czars = [session.czar]
    for _ in range(7):
        play_round(session)
        czars.append(session.czar)

    assert czars[:4] == players
    assert czars[4:] == players
    assert all(a is not b for a, b in zip(czars, czars[1:]))


def test_czar_rotation_skips_inactive_players(make_session, scheduler):
    session = make_session()
    players = [make_player(name) for name in ('alice', 'bob', 'carol', 'dave')]
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    assert session.czar is players[0]

    session.remove_player(players[1])
    play_round(session)

    assert session.czar is players[2]


def test_czar_stays_when_alone(make_session, scheduler):
    session = make_session()
    alice = make_player('alice')
    session.add_player(alice)
    session.czar = alice

    assert session.set_czar() is alice
    assert alice.is_czar


def test_only_one_czar_per_round(make_session, scheduler, players):
    session = make_session()
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    for _ in range(3):
        assert sum(p.is_czar for p in session.players) == 1
        play_round(session)


def test_all_played_ignores_players_without_cards(playing_session):
    """A player who joined mid-round has no cards and does not block judging."""
    session = playing_session
    late = make_player('dave')
    session.add_player(late)

    assert late.has_played
    assert late.hand.size() == 0
    play_all(session)
    assert session.state is GameState.PLAYED


def test_late_joiner_is_dealt_in_next_round(playing_session):
    session = playing_session
    late = make_player('dave')
    session.add_player(late)

    play_round(session)

    assert not late.has_played
    assert late.hand.size() == 10


def test_cards_are_conserved(make_session, scheduler, players):
    """Per-kind card totals never change across deals, discards and rounds."""
    session = make_session(cards=make_specs(prompts=5, responses=45))
    for player in players:
        session.add_player(player)
    scheduler.advance(30)

    for round_number in range(12):
        assert session.total_cards(CardType.PROMPT) == 5
        assert session.total_cards(CardType.RESPONSE) == 45
        player = non_czar(session)[0]
        player.points += 1
        session.discard([0, 1], player)
        assert session.total_cards(CardType.RESPONSE) == 45
        play_round(session)

    assert session.state is GameState.PLAYABLE
    assert session.round == 13


def test_empty_deck_recycles_discard_pile(make_session, scheduler, players):
    """An empty response deck is refilled from the discard pile on the next deal."""
    session = make_session(cards=make_specs(responses=70))
    for player in players:
        session.add_player(player)
    scheduler.advance(30)

    deck = session.decks[CardType.RESPONSE]
    pile = session.discards[CardType.RESPONSE]
    pile.reset(deck.reset())
    assert deck.size() == 0
    assert pile.size() == 40

    player = non_czar(session)[0]
    session.play_card([0], player)
    session.deal()

    assert deck.size() > 0
    assert pile.size() == 0
    assert player.hand.size() == 10


def test_prompts_are_recycled(make_session, scheduler, players):
    session = make_session(cards=make_specs(prompts=2))
    for player in players:
        session.add_player(player)
    scheduler.advance(30)

    for _ in range(5):
        play_round(session)

    assert session.round == 6
    assert session.prompt is not None
    assert session.total_cards(CardType.PROMPT) == 2


def test_exhausted_responses_do_not_crash(make_session, scheduler, players):
    """Test dealing stops quietly when there are no cards left anywhere."""
    session = make_session(cards=make_specs(responses=20))
    for player in players:
        session.add_player(player)
    scheduler.advance(30)

    sizes = sorted(p.hand.size() for p in session.players)
    assert sum(sizes) == 20
    assert session.state is GameState.PLAYABLE


def test_deal_to_one_player_fills_to_hand_size(playing_session):
    session = playing_session
    player = non_czar(session)[0]
    player.hand.pick_cards([0, 1, 2])

    session.deal(player)

    assert player.hand.size() == session.options.hand_size


def test_deal_to_one_player_with_target_size(playing_session):
    session = playing_session
    player = non_czar(session)[0]

    session.deal(player, 12)

    assert player.hand.size() == 12
