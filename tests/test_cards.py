"""
Tests for card collections.
"""

from collections import Counter

import pytest

from game import Card, CardCollection, CardType, InvalidIndex


def make_collection(n=5):
    return CardCollection([{'type': 'Answer', 'value': f"Response {i}"} for i in range(n)])


def test_wraps_raw_specs():
    """Test raw specs become Card objects with ids."""
    collection = make_collection(3)

    assert collection.size() == 3
    assert all(isinstance(c, Card) for c in collection)
    assert all(c.type is CardType.RESPONSE for c in collection)
    assert len({c.id for c in collection}) == 3


def test_invalid_specs_are_skipped():
    """Test specs without text or with an unknown type are dropped."""
    collection = CardCollection([
        {'type': 'Answer', 'value': 'ok'},
        {'type': 'Answer'},
        {'type': 'Purple', 'value': 'nope'},
        'not a dict',
    ])

    assert collection.size() == 1


def test_pick_single_card():
    """Test picking one index removes and returns that card."""
    collection = make_collection()
    second = collection.get_cards()[1]

    picked = collection.pick_cards(1)

    assert picked is second
    assert collection.size() == 4
    assert second not in collection


def test_pick_default_is_top_card():
    collection = make_collection()
    first = collection.get_cards()[0]

    assert collection.pick_cards() is first


def test_pick_list_keeps_requested_order():
    """Test a list of indexes returns a new collection in request order."""
    collection = make_collection()
    cards = collection.get_cards()

    picked = collection.pick_cards([3, 0])

    assert isinstance(picked, CardCollection)
    assert picked.get_cards() == [cards[3], cards[0]]
    assert collection.get_cards() == [cards[1], cards[2], cards[4]]


@pytest.mark.parametrize('indexes', [[0, 9], [-1], [1, 1], ['1'], [True]])
def test_pick_list_is_atomic(indexes):
    """Test an invalid index anywhere leaves the collection unchanged."""
    collection = make_collection()
    before = collection.get_cards()

    with pytest.raises(InvalidIndex):
        collection.pick_cards(indexes)

    assert collection.get_cards() == before


def test_pick_single_invalid_index():
    collection = make_collection(2)

    with pytest.raises(InvalidIndex) as excinfo:
        collection.pick_cards(5)

    assert excinfo.value.index == 5
    assert excinfo.value.size == 2
    assert collection.size() == 2


def test_shuffle_preserves_contents():
    """Test shuffling keeps the exact multiset of cards."""
    collection = make_collection(30)
    before = Counter(id(c) for c in collection)

    collection.shuffle()

    assert Counter(id(c) for c in collection) == before


def test_reset_returns_old_cards():
    collection = make_collection(3)
    replacement = make_collection(2).get_cards()

    old = collection.reset(replacement)

    assert len(old) == 3
    assert collection.get_cards() == replacement


def test_remove_card_uses_identity():
    """Test remove_card only removes the exact object."""
    collection = make_collection(3)
    card = collection.get_cards()[1]
    lookalike = Card(card.id, card.type, card.value)

    collection.remove_card(lookalike)
    assert collection.size() == 3

    collection.remove_card(card)
    assert collection.size() == 2
    assert card not in collection


def test_iteration_is_safe_while_removing():
    """Test iterating while removing visits every card."""
    collection = make_collection(4)
    for card in collection:
        collection.remove_card(card)

    assert collection.size() == 0
