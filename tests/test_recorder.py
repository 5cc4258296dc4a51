"""
Tests for recording games to the database (in-memory SQLite).
"""

from unittest.mock import patch

import pytest

from database import (
    DatabaseRecorder, CardCombo, Points, Round,
    get_db_session, get_game_summary, get_most_played_cards, init_database, seed_cards
)

from conftest import make_specs, non_czar, play_all


@pytest.fixture
def database(card_specs):
    init_database('sqlite://')
    seed_cards(card_specs)


def test_seed_cards_is_idempotent(database, card_specs):
    assert seed_cards(card_specs) == 0
    assert seed_cards(make_specs(prompts=21)[20:21]) == 1


def test_game_is_recorded(database, make_session, scheduler, players):
    """Test a played round ends up in the database."""
    recorder = DatabaseRecorder()
    session = make_session(recorder=recorder)
    assert recorder.game_id is not None

    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    play_all(session)
    winner = session.submissions[0].owner
    session.select_winner(0, session.czar)
    session.stop()

    summary = get_game_summary(recorder.game_id)
    assert summary['channel'] == '#cah'
    assert summary['num_rounds'] == 2
    assert summary['rounds_recorded'] == 2
    assert summary['card_combos'] == 2
    assert summary['ended_at'] is not None
    assert summary['point_limit_reached'] is False

    with get_db_session() as db:
        first_round = db.query(Round).filter_by(game_id=recorder.game_id, round_number=1).one()
        assert first_round.winner.nick == winner.nick
        assert first_round.question_id is not None
        winning = db.query(CardCombo).filter_by(game_id=recorder.game_id, winner=True).all()
        assert len(winning) == 1
        points = {row.player.nick: row.points for row in db.query(Points).all()}
        assert points[winner.nick] == 1
        assert len(points) == 3


def test_most_played_cards(database, make_session, scheduler, players):
    session = make_session(recorder=DatabaseRecorder())
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    for player in non_czar(session):
        session.play_card([0], player)

    cards = get_most_played_cards(limit=3)

    assert len(cards) == 3
    assert all(card['times_played'] == 1 for card in cards)


def test_point_limit_winner_is_recorded(database, make_session, scheduler, players):
    recorder = DatabaseRecorder()
    session = make_session(recorder=recorder, point_limit=1)
    for player in players:
        session.add_player(player)
    scheduler.advance(30)
    play_all(session)
    winner = session.submissions[0].owner

    session.select_winner(0, session.czar)

    summary = get_game_summary(recorder.game_id)
    assert summary['point_limit_reached'] is True
    assert summary['winner'] == winner.nick


def test_recorder_failures_do_not_stop_the_game(make_session, scheduler, players):
    """Test database errors are logged and the game carries on."""
    with patch('database.setters.create_game', side_effect=RuntimeError('db down')), \
            patch('database.setters.upsert_player', side_effect=RuntimeError('db down')):
        recorder = DatabaseRecorder()
        session = make_session(recorder=recorder)
        for player in players:
            session.add_player(player)

    scheduler.advance(30)

    assert recorder.game_id is None
    assert session.round == 1
