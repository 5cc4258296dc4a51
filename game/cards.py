"""
Card collections.

A CardCollection is an ordered set of Card references used for decks,
discard piles, hands and table submissions. A card lives in exactly one
collection at a time; moving a card means removing it from one collection
and adding it to another.
"""

import itertools
import logging
import random
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Union

from .exceptions import InvalidIndex
from .models import Card

logger = logging.getLogger(__name__)

_card_ids = itertools.count(1)


def next_card_id() -> str:
    return f"card-{next(_card_ids)}"


class CardCollection:
    """Ordered, mutable collection of cards."""

    def __init__(self, items: Optional[Iterable[Any]] = None, owner=None):
        """
        Create a collection, wrapping raw card specs into Card objects.

        Args:
            items: Card instances or raw spec dicts; invalid specs are skipped
            owner: Player a table submission belongs to
        """
        self.cards: List[Card] = []
        self.owner = owner

        for item in items or []:
            if isinstance(item, Card):
                self.cards.append(item)
                continue
            try:
                self.cards.append(Card.from_spec(item, next_card_id()))
            except (ValueError, TypeError, AttributeError) as e:
                logger.error(f"Invalid card {item!r}: {e}")

    def reset(self, replacement: Optional[List[Card]] = None) -> List[Card]:
        """
        Replace the backing list.

        Returns:
            The list of cards that was replaced
        """
        old_cards = self.cards
        self.cards = list(replacement) if replacement is not None else []
        return old_cards

    def shuffle(self):
        random.shuffle(self.cards)

    def add_card(self, card: Card) -> Card:
        self.cards.append(card)
        return card

    def remove_card(self, card: Card) -> Card:
        """Remove the first occurrence of this exact card object, if present."""
        for i, existing in enumerate(self.cards):
            if existing is card:
                del self.cards[i]
                break
        return card

    def pick_cards(self, index: Union[int, Sequence[int]] = 0) -> Union[Card, 'CardCollection']:
        """
        Remove cards from the collection and return them.

        Args:
            index: A single index, or a list of indexes

        Returns:
            The card for a single index, or a new CardCollection holding the
            picked cards in the requested order for a list of indexes

        Raises:
            InvalidIndex: If any index does not exist. Nothing is removed.
        """
        if isinstance(index, (list, tuple)):
            indexes = list(index)
            seen = set()
            for i in indexes:
                if not self._valid_index(i) or i in seen:
                    raise InvalidIndex(i, len(self.cards))
                seen.add(i)

            picked = CardCollection([self.cards[i] for i in indexes])
            self.cards = [card for i, card in enumerate(self.cards) if i not in seen]
            logger.debug(f"Picked cards {[c.id for c in picked]}, {len(self.cards)} remaining")
            return picked

        if not self._valid_index(index):
            raise InvalidIndex(index, len(self.cards))
        return self.cards.pop(index)

    def _valid_index(self, index) -> bool:
        return (isinstance(index, int) and not isinstance(index, bool)
                and 0 <= index < len(self.cards))

    def get_cards(self) -> List[Card]:
        return list(self.cards)

    def size(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self.cards))

    def __contains__(self, card) -> bool:
        return any(existing is card for existing in self.cards)

    def __repr__(self):
        return f"<CardCollection(size={len(self.cards)})>"
