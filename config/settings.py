import os
from dataclasses import dataclass
from dotenv import load_dotenv

from utils.constants import HAND_SIZE, MIN_PLAYERS

# Only load the .env file if we're not on Render (i.e., we are in a local environment)
if os.environ.get("RENDER") != "true":
    load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class GameOptions:
    """Per-game options. A session copies these at construction."""
    seconds_before_start: int = 30
    round_minutes: float = 3
    max_players: int = 10
    idle_limit: int = 3
    point_limit: int = 0
    hand_size: int = HAND_SIZE
    min_players: int = MIN_PLAYERS
    database: bool = False
    notify_users: bool = False
    bot_nick: str = 'cahbot'

    @property
    def round_seconds(self) -> float:
        return self.round_minutes * 60

    @classmethod
    def from_env(cls) -> 'GameOptions':
        return cls(
            seconds_before_start=_env_int('GAME_SECONDS_BEFORE_START', 30),
            round_minutes=_env_int('GAME_ROUND_MINUTES', 3),
            max_players=_env_int('GAME_MAX_PLAYERS', 10),
            idle_limit=_env_int('GAME_IDLE_LIMIT', 3),
            point_limit=_env_int('GAME_POINT_LIMIT', 0),
            database=_env_bool('GAME_DATABASE', False),
            notify_users=_env_bool('GAME_NOTIFY_USERS', False),
            bot_nick=os.getenv('GAME_BOT_NICK', 'cahbot'),
        )


# Flask Configuration
SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key_that_should_be_changed')
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

# Database Configuration
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///cah.db')

# Card corpus
CARDS_FILE = os.getenv('CARDS_FILE', os.path.join(os.path.dirname(os.path.dirname(__file__)), 'data', 'cards.json'))

# Server Configuration
PORT = int(os.getenv('PORT', 5000))
DEBUG = os.environ.get('RENDER', '') != 'true'
SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE', 'threading')

GAME_OPTIONS = GameOptions.from_env()
