"""
Tests for loading the card corpus.
"""

import json
import os

import pytest

from config.settings import CARDS_FILE
from game import CardCorpusError, CardType, load_cards, validate_corpus
from game.corpus import count_by_type


def write_json(tmp_path, data, name='cards.json'):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


def test_load_list(tmp_path):
    path = write_json(tmp_path, [
        {'type': 'Question', 'value': '%s?', 'pick': 1},
        {'type': 'Answer', 'value': 'Yes'},
    ])

    cards = load_cards(path)

    assert len(cards) == 2
    assert count_by_type(cards) == {CardType.PROMPT: 1, CardType.RESPONSE: 1}


def test_load_object_with_cards_key(tmp_path):
    path = write_json(tmp_path, {'cards': [{'type': 'Answer', 'value': 'Yes'}]})

    assert load_cards(path) == [{'type': 'Answer', 'value': 'Yes'}]


def test_missing_file(tmp_path):
    with pytest.raises(CardCorpusError):
        load_cards(str(tmp_path / 'nope.json'))


def test_malformed_json(tmp_path):
    path = tmp_path / 'cards.json'
    path.write_text('[{"type": ', encoding='utf-8')

    with pytest.raises(CardCorpusError):
        load_cards(str(path))


def test_not_a_list(tmp_path):
    with pytest.raises(CardCorpusError):
        load_cards(write_json(tmp_path, {'questions': []}))


def test_validate_corpus_needs_both_kinds():
    with pytest.raises(CardCorpusError):
        validate_corpus([{'type': 'Answer', 'value': 'Yes'}])

    validate_corpus([{'type': 'Question', 'value': '%s?'}, {'type': 'Answer', 'value': 'Yes'}])


@pytest.mark.skipif(not os.path.exists(CARDS_FILE), reason='bundled corpus not found')
def test_bundled_corpus_is_playable():
    """Test the shipped card file can run a game."""
    cards = load_cards(CARDS_FILE)

    validate_corpus(cards)
    counts = count_by_type(cards)
    assert counts[CardType.RESPONSE] >= 30
