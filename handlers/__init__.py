"""
Handlers Module for Cards Against Humanity.

Contains all web layer handlers (Socket.IO and API) with no game logic.
Handlers coordinate between the chat transport and the game manager.
"""

from .connections import ConnectionManager, ChatConnection
from .socket_messenger import SocketIOMessenger
from .socket_handlers import register_socket_handlers
from .api_handlers import register_api_handlers

__all__ = [
    'ConnectionManager',
    'ChatConnection',
    'SocketIOMessenger',
    'register_socket_handlers',
    'register_api_handlers'
]
