"""
Cards Against Humanity - Chat Game Server

Flask-SocketIO backend that hosts Cards Against Humanity games in chat
channels. App.py is purely server setup and handler registration; game rules
live in the game/ package.
"""

import logging
from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config.settings import (
    SECRET_KEY, CORS_ORIGINS, CARDS_FILE, PORT, DEBUG, SOCKETIO_ASYNC_MODE, GAME_OPTIONS
)
from game import EventHub, GameManager, load_cards, validate_corpus
from handlers import (
    ConnectionManager, SocketIOMessenger, register_socket_handlers, register_api_handlers
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(options=None, cards_file=CARDS_FILE):
    """
    Application factory that creates and configures the Flask app.

    Args:
        options: GameOptions overriding the environment defaults
        cards_file: Path to the JSON card corpus

    Returns:
        Tuple of (app, socketio, game_manager)
    """
    options = options or GAME_OPTIONS

    # Flask configuration
    app = Flask(__name__)
    app.config['SECRET_KEY'] = SECRET_KEY

    # CORS configuration for the chat frontend
    CORS(app, origins=CORS_ORIGINS.split(','))

    # ProxyFix for deployment behind reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # SocketIO configuration
    socketio = SocketIO(
        app,
        cors_allowed_origins=CORS_ORIGINS.split(','),
        async_mode=SOCKETIO_ASYNC_MODE,
        ping_timeout=60,
        ping_interval=25
    )

    # A server without a playable corpus is a configuration error
    logger.info(f"Loading cards from {cards_file}...")
    cards = load_cards(cards_file)
    validate_corpus(cards)

    recorder_factory = None
    if options.database:
        from database import init_database, seed_cards, DatabaseRecorder

        logger.info("Initializing database...")
        init_database()
        added = seed_cards(cards)
        logger.info(f"Seeded {added} new cards")
        recorder_factory = DatabaseRecorder

    # Initialize game components
    events = EventHub()
    connections = ConnectionManager()
    messenger = SocketIOMessenger(socketio, connections, events)
    game_manager = GameManager(
        cards,
        options=options,
        messenger=messenger,
        events=events,
        recorder_factory=recorder_factory
    )

    # Register handlers (pure routing layer)
    logger.info("Registering handlers...")
    register_socket_handlers(socketio, game_manager, events, connections)
    register_api_handlers(app, game_manager, database_enabled=options.database)

    logger.info("Application initialization complete")
    return app, socketio, game_manager


def main():
    """Main entry point for development server."""
    app, socketio, game_manager = create_app()

    logger.info(f"Starting Cards Against Humanity game server on port {PORT}")
    logger.info(f"Debug mode: {DEBUG}")
    logger.info(f"CORS origins: {CORS_ORIGINS}")

    try:
        socketio.run(app, debug=DEBUG, port=PORT, host='0.0.0.0', allow_unsafe_werkzeug=True)
    finally:
        game_manager.stop_all()


if __name__ == '__main__':
    main()
