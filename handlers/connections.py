"""
Connection Manager for chat clients.

Tracks which socket belongs to which nick and which channels it has joined.
Contains no game logic - purely connection and session management.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


@dataclass
class ChatConnection:
    """Information about a connected chat client."""
    socket_id: str
    nick: str
    user: str
    hostname: str
    mode: str = ''
    channels: Set[str] = field(default_factory=set)
    connected_at: datetime = field(default_factory=datetime.now)


class ConnectionManager:
    """
    Maps sockets to nicks and channels.

    Used by the Socket.IO messenger to route direct messages and by the
    handlers to build channel name lists.
    """

    def __init__(self):
        self.connections: Dict[str, ChatConnection] = {}  # socket_id -> ChatConnection
        self.nick_to_socket: Dict[str, str] = {}  # nick -> socket_id
        self._lock = threading.Lock()

    def register(self, socket_id: str, nick: str, user: str, hostname: str,
                 mode: str = '') -> Tuple[bool, str]:
        """
        Register a chat client.

        Returns:
            Tuple of (success, message)
        """
        with self._lock:
            existing = self.nick_to_socket.get(nick)
            if existing and existing != socket_id:
                return False, f"Nick {nick} is already in use"

            self.connections[socket_id] = ChatConnection(
                socket_id=socket_id, nick=nick, user=user, hostname=hostname, mode=mode)
            self.nick_to_socket[nick] = socket_id

        logger.info(f"Registered connection: {nick} ({socket_id})")
        return True, f"Connected as {nick}"

    def unregister(self, socket_id: str) -> Optional[ChatConnection]:
        with self._lock:
            connection = self.connections.pop(socket_id, None)
            if connection and self.nick_to_socket.get(connection.nick) == socket_id:
                del self.nick_to_socket[connection.nick]

        if connection:
            logger.info(f"Unregistered connection: {connection.nick} ({socket_id})")
        return connection

    def rename(self, socket_id: str, new_nick: str) -> Tuple[bool, str, Optional[str]]:
        """
        Change the nick of a connection.

        Returns:
            Tuple of (success, message, old_nick)
        """
        with self._lock:
            connection = self.connections.get(socket_id)
            if not connection:
                return False, "Not registered", None
            if new_nick in self.nick_to_socket and self.nick_to_socket[new_nick] != socket_id:
                return False, f"Nick {new_nick} is already in use", None

            old_nick = connection.nick
            self.nick_to_socket.pop(old_nick, None)
            connection.nick = new_nick
            self.nick_to_socket[new_nick] = socket_id

        logger.info(f"{old_nick} is now known as {new_nick}")
        return True, f"Now known as {new_nick}", old_nick

    def join_channel(self, socket_id: str, channel: str) -> bool:
        with self._lock:
            connection = self.connections.get(socket_id)
            if not connection:
                return False
            connection.channels.add(channel)
        return True

    def leave_channel(self, socket_id: str, channel: str) -> bool:
        with self._lock:
            connection = self.connections.get(socket_id)
            if not connection or channel not in connection.channels:
                return False
            connection.channels.discard(channel)
        return True

    def get(self, socket_id: str) -> Optional[ChatConnection]:
        return self.connections.get(socket_id)

    def socket_for_nick(self, nick: str) -> Optional[str]:
        return self.nick_to_socket.get(nick)

    def names(self, channel: str) -> Dict[str, str]:
        """Nick -> mode of every client in a channel."""
        with self._lock:
            return {c.nick: c.mode for c in self.connections.values() if channel in c.channels}

    def channels_of(self, socket_id: str) -> List[str]:
        connection = self.connections.get(socket_id)
        return sorted(connection.channels) if connection else []
