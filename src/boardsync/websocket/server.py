"""WebSocket server that keeps every connected board view in sync."""

import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from .broadcaster import MessageBroadcaster
from .serializers import create_init_message
from ..server.constants import EventConstants


logger = logging.getLogger(__name__)

MessageHandler = Callable[[Union[str, bytes], ServerConnection], Awaitable[Any]]


class BoardWebSocketServer:
    """
    WebSocket server for board synchronization.

    Manages client connections, sends each newcomer the full board and
    hands every inbound frame to the message handler (the mutation router).
    """

    def __init__(self, host: str = EventConstants.DEFAULT_HOST, port: int = EventConstants.DEFAULT_PORT):
        """
        Initialize the WebSocket server.

        Args:
            host: Host address to bind to
            port: Port to listen on (0 picks a free port)
        """
        self.host = host
        self.port = port
        self.broadcaster = MessageBroadcaster()
        self.server: Optional[Server] = None
        self._board_provider: Optional[Callable[[], Dict[str, Any]]] = None
        self._on_client_message: Optional[MessageHandler] = None
        self._running = False

    def set_board_provider(self, provider: Callable[[], Dict[str, Any]]) -> None:
        """
        Set the callable returning the current board for INIT snapshots.

        Args:
            provider: Usually DocumentStore.load
        """
        self._board_provider = provider

    def set_message_handler(self, handler: MessageHandler) -> None:
        """
        Set a handler for client messages.

        Args:
            handler: Async function called with (raw_frame, websocket)
        """
        self._on_client_message = handler

    async def start(self) -> None:
        """Start the WebSocket server."""
        if self._running:
            logger.warning("Server is already running")
            return

        logger.info(f"Starting WebSocket server on {self.host}:{self.port}")
        self.server = await serve(
            self._handle_client,
            self.host,
            self.port,
            process_request=self._process_request,
        )
        # Resolve the real port when an ephemeral one was requested
        sockets = list(self.server.sockets)
        if sockets:
            self.port = sockets[0].getsockname()[1]
        self._running = True
        logger.info(f"WebSocket server started on ws://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the WebSocket server."""
        if not self._running:
            return

        logger.info("Stopping WebSocket server")
        self._running = False

        await self.broadcaster.close_all()

        if self.server:
            self.server.close()
            await self.server.wait_closed()

        logger.info("WebSocket server stopped")

    def _process_request(self, connection: ServerConnection, request: Request) -> Optional[Response]:
        """Answer plain HTTP health checks; let everything else upgrade."""
        if request.path == EventConstants.HEALTH_PATH:
            return connection.respond(HTTPStatus.OK, "OK\n")
        return None

    async def register_client(self, websocket: ServerConnection) -> None:
        """
        Register a connection and send it the full board.

        Args:
            websocket: Newly accepted connection
        """
        await self.broadcaster.register(websocket)
        if self._board_provider is not None:
            await self.send_to(websocket, create_init_message(self._board_provider()))

    async def _handle_client(self, websocket: ServerConnection) -> None:
        """
        Handle a client connection.

        Args:
            websocket: WebSocket connection
        """
        await self.register_client(websocket)

        try:
            async for message_str in websocket:
                if self._on_client_message:
                    await self._on_client_message(message_str, websocket)
                else:
                    logger.debug("No message handler set, ignoring client message")

        except ConnectionClosed:
            logger.info("Client connection closed")
        except Exception as e:
            logger.error(f"Error in client handler: {e}")
        finally:
            await self.broadcaster.unregister(websocket)

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[ServerConnection] = None) -> None:
        """
        Broadcast a message to all clients.

        Args:
            message: Message dictionary
            exclude: Optional connection to skip (the sender of an activity signal)
        """
        await self.broadcaster.broadcast(message, exclude=exclude)
        logger.debug(f"Broadcasted {message.get('type')} to clients")

    async def send_to(self, websocket: ServerConnection, message: Dict[str, Any]) -> None:
        """Send a message to one client."""
        await self.broadcaster.send_to_client(websocket, message)

    def get_client_count(self) -> int:
        """
        Get the number of connected clients.

        Returns:
            Number of connected clients
        """
        return self.broadcaster.get_client_count()

    def is_running(self) -> bool:
        """
        Check if the server is running.

        Returns:
            True if running, False otherwise
        """
        return self._running
