"""
API Route Handlers for Cards Against Humanity.

Pure routing layer that delegates to the game manager and database getters.
Contains no game logic - only request/response handling.
"""

import logging
from flask import jsonify, request

logger = logging.getLogger(__name__)


def register_api_handlers(app, game_manager, database_enabled=False):
    """
    Register all API route handlers.

    Args:
        app: Flask application instance
        game_manager: GameManager holding the running games
        database_enabled: Whether recorded game statistics are available
    """

    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'message': 'Cards Against Humanity game server is running',
            'games': len(game_manager.registry)
        })

    @app.route('/api/games')
    def get_games():
        """List of channels with a running game."""
        try:
            games = []
            for channel in game_manager.registry.channels():
                game = game_manager.get_game(channel)
                if game is None:
                    continue
                games.append({
                    'channel': channel,
                    'state': game.state.value,
                    'round': game.round,
                    'players': len(game.active_players())
                })
            return jsonify({'games': games})

        except Exception as e:
            logger.error(f"Error listing games: {e}")
            return jsonify({'error': 'Failed to list games'}), 500

    @app.route('/api/games/<path:channel>')
    def get_game(channel):
        """Full state of the game running in a channel."""
        try:
            game = game_manager.get_game(channel)
            if game is None:
                return jsonify({'error': 'No game running in that channel'}), 404
            with game.lock:
                return jsonify(game.to_dict())

        except Exception as e:
            logger.error(f"Error getting game for {channel}: {e}")
            return jsonify({'error': 'Failed to get game'}), 500

    @app.route('/api/stats/cards')
    def get_card_stats():
        """Most played cards across recorded games."""
        if not database_enabled:
            return jsonify({'message': 'No statistics available'})
        try:
            from database import get_most_played_cards

            limit = request.args.get('limit', 10, type=int)
            return jsonify({'cards': get_most_played_cards(limit)})

        except Exception as e:
            logger.error(f"Error getting card statistics: {e}")
            return jsonify({'error': 'Failed to get statistics'}), 500

    @app.route('/api/stats/games/<int:game_id>')
    def get_game_stats(game_id):
        """Summary of a recorded game."""
        if not database_enabled:
            return jsonify({'message': 'No statistics available'})
        try:
            from database import get_game_summary

            summary = get_game_summary(game_id)
            if summary is None:
                return jsonify({'error': 'Game not found'}), 404
            return jsonify(summary)

        except Exception as e:
            logger.error(f"Error getting game {game_id}: {e}")
            return jsonify({'error': 'Failed to get statistics'}), 500

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("API handlers registered successfully")
