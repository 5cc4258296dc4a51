"""
Database Package for Cards Against Humanity.

Provides clean imports for all database functionality.
"""

# Models
from .models import (
    Base,
    Game,
    Player,
    Card,
    Round,
    CardCombo,
    Points
)

# Configuration and session management
from .config import (
    configure_database,
    get_db_session,
    init_database
)

# Import getter functions
from .getters import (
    get_player_by_nick,
    get_card_by_text,
    get_cards_by_text,
    get_points,
    get_game_summary,
    get_most_played_cards
)

# Import setter functions
from .setters import (
    seed_cards,
    create_game,
    upsert_player,
    create_round,
    create_card_combo,
    set_round_winner,
    update_points,
    end_game
)

from .recorder import DatabaseRecorder

__all__ = [
    # Models
    "Base",
    "Game",
    "Player",
    "Card",
    "Round",
    "CardCombo",
    "Points",

    # Configuration
    "configure_database",
    "get_db_session",
    "init_database",

    # Getters
    "get_player_by_nick",
    "get_card_by_text",
    "get_cards_by_text",
    "get_points",
    "get_game_summary",
    "get_most_played_cards",

    # Setters
    "seed_cards",
    "create_game",
    "upsert_player",
    "create_round",
    "create_card_combo",
    "set_round_winner",
    "update_points",
    "end_game",

    # Recorder
    "DatabaseRecorder",
]
