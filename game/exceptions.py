"""
Exceptions raised by the game core.

Player-facing errors (ValidationError, IllegalStateError) are caught at the
session operation boundary and reported back to the player. CardCorpusError
is a configuration problem and is allowed to propagate.
"""


class GameError(Exception):
    """Base class for all game errors."""


class ValidationError(GameError):
    """Bad input from a player: card index, pick count, winner index."""


class InvalidIndex(ValidationError):
    """A card index that does not exist in the collection."""

    def __init__(self, index, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Invalid card index {index!r} (collection has {size} cards)")


class IllegalStateError(GameError):
    """Action not allowed in the current game state."""


class CardCorpusError(GameError):
    """Card corpus is missing, malformed or has no cards of a kind."""
