"""WebSocket server module for streaming board updates to clients."""

from .server import BoardWebSocketServer
from .serializers import ProtocolError, create_message, create_init_message
from .broadcaster import MessageBroadcaster

__all__ = [
    'BoardWebSocketServer',
    'ProtocolError',
    'create_message',
    'create_init_message',
    'MessageBroadcaster',
]
