"""
Socket.IO Event Handlers for Cards Against Humanity.

Pure routing layer that delegates to the game manager and connection manager.
Contains no game logic - only event routing and response formatting.
Channel membership changes are forwarded to the roster event hub so running
games can react to players leaving, quitting, being kicked or renaming.
"""

import logging
from flask import request
from flask_socketio import emit, join_room, leave_room

from game import events as roster

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio, game_manager, events, connections):
    """
    Register all Socket.IO event handlers.

    Args:
        socketio: SocketIO instance
        game_manager: GameManager routing chat commands
        events: EventHub shared with the running games
        connections: ConnectionManager tracking chat clients
    """

    @socketio.on('connect')
    def handle_connect():
        """Handle client connection."""
        logger.info(f"Client connected: {request.sid}")
        emit('connected', {'message': 'Connected to server successfully'})

    @socketio.on('disconnect')
    def handle_disconnect():
        """Handle client disconnection."""
        logger.info(f"Client disconnected: {request.sid}")

        try:
            connection = connections.unregister(request.sid)
            if connection:
                events.emit(roster.QUIT, connection.nick)
        except Exception as e:
            logger.error(f"Error handling disconnect: {e}")

    @socketio.on('register')
    def handle_register(data):
        """Handle nick registration."""
        try:
            nick = (data.get('nick') or '').strip()
            user = (data.get('user') or nick).strip()
            if not nick:
                emit('error', {'message': 'Nick is required'})
                return

            success, message = connections.register(
                request.sid, nick, user, request.remote_addr or 'unknown', data.get('mode', ''))
            if success:
                emit('registered', {'nick': nick, 'message': message})
            else:
                emit('error', {'message': message})

        except Exception as e:
            logger.error(f"Error registering connection: {e}")
            emit('error', {'message': 'Failed to register'})

    @socketio.on('join_channel')
    def handle_join_channel(data):
        """Handle joining a channel."""
        try:
            channel = data.get('channel')
            connection = connections.get(request.sid)
            if not connection or not channel:
                emit('error', {'message': 'Register and name a channel first'})
                return

            connections.join_channel(request.sid, channel)
            join_room(channel)
            socketio.emit('channel_joined', {
                'channel': channel,
                'nick': connection.nick
            }, room=channel)

        except Exception as e:
            logger.error(f"Error joining channel: {e}")
            emit('error', {'message': 'Failed to join channel'})

    @socketio.on('leave_channel')
    def handle_leave_channel(data):
        """Handle leaving a channel."""
        try:
            channel = data.get('channel')
            connection = connections.get(request.sid)
            if not connection or not connections.leave_channel(request.sid, channel):
                emit('error', {'message': 'Not in that channel'})
                return

            leave_room(channel)
            socketio.emit('channel_left', {
                'channel': channel,
                'nick': connection.nick
            }, room=channel)
            events.emit(roster.PART, channel, connection.nick)

        except Exception as e:
            logger.error(f"Error leaving channel: {e}")
            emit('error', {'message': 'Failed to leave channel'})

    @socketio.on('rename')
    def handle_rename(data):
        """Handle a nick change."""
        try:
            success, message, old_nick = connections.rename(request.sid, (data.get('nick') or '').strip())
            if not success:
                emit('error', {'message': message})
                return

            new_nick = connections.get(request.sid).nick
            for channel in connections.channels_of(request.sid):
                socketio.emit('nick_changed', {'old': old_nick, 'new': new_nick}, room=channel)
            events.emit(roster.NICK, old_nick, new_nick)

        except Exception as e:
            logger.error(f"Error renaming: {e}")
            emit('error', {'message': 'Failed to change nick'})

    @socketio.on('kick')
    def handle_kick(data):
        """Handle kicking a nick from a channel."""
        try:
            channel = data.get('channel')
            target = data.get('nick')
            kicker = connections.get(request.sid)
            target_sid = connections.socket_for_nick(target)
            if not kicker or not target_sid or not connections.leave_channel(target_sid, channel):
                emit('error', {'message': f"{target} is not in {channel}"})
                return

            leave_room(channel, sid=target_sid)
            socketio.emit('kicked', {
                'channel': channel,
                'nick': target,
                'by': kicker.nick
            }, room=channel)
            events.emit(roster.KICK, channel, target, kicker.nick)

        except Exception as e:
            logger.error(f"Error kicking: {e}")
            emit('error', {'message': 'Failed to kick'})

    @socketio.on('command')
    def handle_command(data):
        """Handle a chat command such as !join or !pick 1 2."""
        try:
            connection = connections.get(request.sid)
            channel = data.get('channel')
            if not connection or channel not in connection.channels:
                emit('error', {'message': 'Join the channel before sending commands'})
                return

            success, message = game_manager.dispatch(
                data.get('command', ''),
                channel,
                connection.nick,
                connection.user,
                connection.hostname,
                data.get('args', '')
            )
            emit('command_result', {
                'command': data.get('command'),
                'channel': channel,
                'success': success,
                'message': message
            })

        except Exception as e:
            logger.error(f"Error handling command: {e}")
            emit('error', {'message': 'Failed to run command'})
