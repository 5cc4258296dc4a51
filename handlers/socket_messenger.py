"""
Socket.IO message sink.

Delivers game messages to Socket.IO rooms (channels) and to single clients
(direct messages and notices).
"""

import logging

from game import events as roster
from game.events import EventHub
from game.sinks import MessageSink
from utils.constants import MESSAGE_TYPES
from .connections import ConnectionManager

logger = logging.getLogger(__name__)


class SocketIOMessenger(MessageSink):
    """MessageSink that emits 'game_message' events."""

    def __init__(self, socketio, connections: ConnectionManager, events: EventHub):
        self.socketio = socketio
        self.connections = connections
        self.events = events

    def say(self, channel: str, text: str):
        self.socketio.emit('game_message', {
            'type': MESSAGE_TYPES['SAY'],
            'channel': channel,
            'text': text
        }, room=channel)

    def _to_nick(self, nick: str, message_type: str, text: str):
        socket_id = self.connections.socket_for_nick(nick)
        if not socket_id:
            logger.debug(f"Dropping {message_type} to unknown nick {nick}")
            return
        self.socketio.emit('game_message', {
            'type': message_type,
            'text': text
        }, to=socket_id)

    def direct_message(self, nick: str, text: str):
        self._to_nick(nick, MESSAGE_TYPES['DIRECT'], text)

    def notice(self, nick: str, text: str):
        self._to_nick(nick, MESSAGE_TYPES['NOTICE'], text)

    def request_roster(self, channel: str):
        """Answer with the channel's names once the caller has finished its turn."""
        def send_names():
            self.events.emit(roster.NAMES, channel, self.connections.names(channel))

        self.socketio.start_background_task(send_names)
