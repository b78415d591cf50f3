"""
Board server: document store, mutation routing and WebSocket streaming.

This provides the programmatic interface for:
- Loading the shared board (restoring its snapshot on first access)
- Routing client messages to the handler for their type
- Fanning the resulting events out to connected clients
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import ClientMessage, EventConstants
from .handlers import MutationResult, TaskMutationHandler, TeamMutationHandler
from .services import DocumentStore, SnapshotStore
from .utils import DebouncedSnapshotWriter
from ..websocket.serializers import ProtocolError, decode_message

logger = logging.getLogger(__name__)


class BoardServer:
    """
    Server for the shared task board.

    Owns the document store, the handler registry and (optionally) the
    WebSocket server that clients connect to.
    """

    def __init__(
        self,
        data_file: Optional[Path] = None,
        enable_websocket: bool = False,
        ws_host: str = EventConstants.DEFAULT_HOST,
        ws_port: int = EventConstants.DEFAULT_PORT,
        snapshot_delay: float = EventConstants.SNAPSHOT_DELAY_SECONDS,
    ):
        self.data_file = Path(data_file) if data_file else None

        # Snapshot persistence (optional: without a data file the board lives in memory only)
        self.snapshot_writer: Optional[DebouncedSnapshotWriter] = None
        if self.data_file:
            self.snapshot_writer = DebouncedSnapshotWriter(SnapshotStore(self.data_file), delay=snapshot_delay)
        self.store = DocumentStore(self.snapshot_writer)

        # WebSocket server (optional)
        self.websocket_server: Optional[Any] = None
        self.enable_websocket = enable_websocket
        self.ws_host = ws_host
        self.ws_port = ws_port

        if enable_websocket:
            # Imported here to keep the store usable without a transport
            from ..websocket import BoardWebSocketServer
            self.websocket_server = BoardWebSocketServer(ws_host, ws_port)
            self.websocket_server.set_board_provider(self.store.load)
            self.websocket_server.set_message_handler(self.handle_message)

        # Initialize specialized handlers
        self.task_handler = TaskMutationHandler(self)
        self.team_handler = TeamMutationHandler(self)

        # Handler registry for routing client messages
        self._message_handlers = self._build_message_handler_registry()

    def _build_message_handler_registry(self) -> Dict[str, Any]:
        """
        Build the handler registry for routing client messages.

        Returns a dictionary mapping message types to handler coroutines
        called as handler(payload, websocket).
        """
        return {
            # Task messages
            ClientMessage.ADD_TASK: self.task_handler.handle_add_task,
            ClientMessage.UPDATE_TASK: self.task_handler.handle_update_task,
            ClientMessage.DELETE_TASK: self.task_handler.handle_delete_task,
            ClientMessage.MOVE_TASK: self.task_handler.handle_move_task,
            ClientMessage.ADD_COMMENT: self.task_handler.handle_add_comment,

            # Team messages
            ClientMessage.UPDATE_TEAM_MEMBER: self.team_handler.handle_update_team_member,
            ClientMessage.USER_ACTIVITY: self.team_handler.handle_user_activity,
        }

    def load_board(self) -> Dict[str, Any]:
        """
        Load the board, restoring it from its snapshot on first access.

        Returns:
            The resident board document
        """
        return self.store.load()

    async def handle_message(self, raw: Union[str, bytes], websocket: Any = None) -> Optional[MutationResult]:
        """
        Route one inbound frame to its handler.

        Malformed frames and unknown message types are logged and dropped;
        nothing is ever sent back to the client about them.

        Args:
            raw: Text or binary frame as received
            websocket: Originating connection

        Returns:
            The handler's MutationResult, or None if the frame was dropped
        """
        try:
            message = decode_message(raw)
        except ProtocolError as e:
            logger.warning(f"Dropping malformed client message: {e}")
            return None

        msg_type = message['type']
        handler = self._message_handlers.get(msg_type)
        if handler is None:
            logger.debug(f"Unhandled message type: {msg_type}")
            return None

        logger.debug(f"Received message from client: {msg_type}")
        result = await handler(message.get('payload'), websocket)

        if not result:
            logger.debug(f"{msg_type} dropped: {result.reason}")
        return result

    # WebSocket-related methods

    async def start_websocket_server(self) -> None:
        """Start the WebSocket server if enabled."""
        if self.websocket_server:
            # Restore before accepting connections so the first INIT is complete
            self.store.load()
            await self.websocket_server.start()

    async def stop_websocket_server(self) -> None:
        """Stop the WebSocket server if running."""
        if self.websocket_server:
            await self.websocket_server.stop()

    async def flush(self) -> None:
        """Wait for pending snapshots and queued outbound frames."""
        if self.snapshot_writer:
            await self.snapshot_writer.flush()
        if self.websocket_server:
            await self.websocket_server.broadcaster.flush()

    def get_status(self) -> Dict[str, Any]:
        """
        Get server status.

        Returns:
            Dictionary with board and connection statistics
        """
        status = {
            "tasks": self.store.task_count(),
            "team_members": self.store.member_count(),
            "data_file": str(self.data_file) if self.data_file else None,
            "websocket": {"enabled": False, "running": False},
        }
        if self.websocket_server:
            status["websocket"] = {
                "enabled": True,
                "running": self.websocket_server.is_running(),
                "host": self.ws_host,
                "port": self.websocket_server.port,
                "clients": self.websocket_server.get_client_count(),
            }
        return status
