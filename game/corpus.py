"""
Card corpus loading.

Cards are stored as a JSON list of specs:

    [{"type": "Question", "value": "%s: good to the last drop.", "pick": 1},
     {"type": "Answer", "value": "A windmill full of corpses."}]

A top-level object with a "cards" list is accepted as well.
"""

import json
import logging
import os
from typing import Any, Dict, List

from .exceptions import CardCorpusError
from .models import CardType

logger = logging.getLogger(__name__)


def load_cards(path: str) -> List[Dict[str, Any]]:
    """
    Read card specs from a JSON file.

    Args:
        path: Path to the JSON corpus

    Returns:
        List of raw card spec dicts

    Raises:
        CardCorpusError: If the file is missing or not a card list
    """
    if not os.path.exists(path):
        raise CardCorpusError(f"Card file not found: {path}")

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CardCorpusError(f"Could not read card file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('cards')
    if not isinstance(data, list):
        raise CardCorpusError(f"Card file {path} does not contain a list of cards")

    counts = count_by_type(data)
    logger.info(f"Loaded {len(data)} cards from {path}: "
                f"{counts[CardType.PROMPT]} prompts, {counts[CardType.RESPONSE]} responses")
    return data


def count_by_type(specs: List[Dict[str, Any]]) -> Dict[CardType, int]:
    counts = {CardType.PROMPT: 0, CardType.RESPONSE: 0}
    for spec in specs:
        card_type = CardType.parse(spec.get('type')) if isinstance(spec, dict) else None
        if card_type:
            counts[card_type] += 1
    return counts


def validate_corpus(specs: List[Dict[str, Any]]):
    """
    Fail fast on a corpus a game could not be played with.

    Raises:
        CardCorpusError: If there are no prompts or no responses
    """
    counts = count_by_type(specs)
    if not counts[CardType.PROMPT] or not counts[CardType.RESPONSE]:
        raise CardCorpusError(
            f"Corpus needs prompt and response cards, got {counts[CardType.PROMPT]} "
            f"prompts and {counts[CardType.RESPONSE]} responses"
        )
