"""Message broadcasting utility for WebSocket clients."""

import asyncio
import logging
from typing import Any, Dict, Optional

from websockets.asyncio.server import ServerConnection
from websockets.protocol import State

from ..server.constants import EventConstants
from .serializers import ProtocolError, encode_message


logger = logging.getLogger(__name__)


class MessageBroadcaster:
    """
    Registry of live connections and fan-out of messages to them.

    Uses a per-client queue and worker task pattern to ensure:
    1. Non-blocking broadcast (a message handler never waits on a socket)
    2. Strict message ordering per client (messages are sent sequentially)
    3. Backpressure handling (slow clients don't consume infinite memory)
    4. Isolation (a broken socket only affects its own connection)
    """

    def __init__(self, queue_size: int = EventConstants.CLIENT_QUEUE_SIZE):
        """
        Initialize the broadcaster.

        Args:
            queue_size: Maximum frames buffered per client
        """
        # Map websocket -> {'queue': asyncio.Queue, 'task': asyncio.Task}
        self.clients: Dict[ServerConnection, Dict[str, Any]] = {}
        self.queue_size = queue_size
        self._lock = asyncio.Lock()

    async def register(self, websocket: ServerConnection) -> None:
        """
        Register a new client and start its sender worker.

        Args:
            websocket: WebSocket connection to register
        """
        async with self._lock:
            if websocket not in self.clients:
                queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
                task = asyncio.create_task(self._client_sender_loop(websocket, queue))

                self.clients[websocket] = {
                    'queue': queue,
                    'task': task,
                }
                logger.info(f"Client connected. Total clients: {len(self.clients)}")

    async def unregister(self, websocket: ServerConnection) -> None:
        """
        Unregister a client and stop its worker.

        Idempotent: unknown or already removed connections are ignored.

        Args:
            websocket: WebSocket connection to unregister
        """
        async with self._lock:
            client_data = self.clients.pop(websocket, None)

        if client_data is None:
            return

        # Queued frames will never be sent; release anyone waiting in flush()
        queue: asyncio.Queue = client_data['queue']
        while not queue.empty():
            queue.get_nowait()
            queue.task_done()

        task: asyncio.Task = client_data['task']
        if task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info(f"Client disconnected. Total clients: {len(self.clients)}")

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[ServerConnection] = None) -> None:
        """
        Broadcast a message to all open connections.

        The message is serialized once and pushed onto each client's queue;
        actual sending happens in the background workers.

        Args:
            message: Message dictionary to broadcast
            exclude: Optional connection that should not receive the message
        """
        async with self._lock:
            if not self.clients:
                return
            queues = [
                data['queue'] for websocket, data in self.clients.items()
                if websocket is not exclude and self._is_open(websocket)
            ]

        try:
            message_json = encode_message(message)
        except ProtocolError as e:
            logger.error(f"Failed to serialize message: {e}")
            return

        for q in queues:
            try:
                q.put_nowait(message_json)
            except asyncio.QueueFull:
                logger.warning("Client queue full, dropping message")

    async def send_to_client(self, websocket: ServerConnection, message: Dict[str, Any]) -> None:
        """
        Send a message to a specific client.

        Args:
            websocket: Target WebSocket connection
            message: Message dictionary to send
        """
        try:
            message_json = encode_message(message)
        except ProtocolError as e:
            logger.error(f"Failed to serialize message: {e}")
            return

        async with self._lock:
            if websocket in self.clients:
                queue = self.clients[websocket]['queue']
                try:
                    queue.put_nowait(message_json)
                except asyncio.QueueFull:
                    logger.warning("Client queue full, dropping specific message")

    async def _client_sender_loop(self, websocket: ServerConnection, queue: asyncio.Queue) -> None:
        """
        Background task to send messages to a specific client sequentially.
        """
        try:
            while True:
                message_json = await queue.get()
                failed = False
                try:
                    await websocket.send(message_json)
                except Exception as e:
                    logger.warning(f"Failed to send to client: {e}")
                    failed = True
                finally:
                    # Runs on cancellation too; flush() joins this queue
                    queue.task_done()
                if failed:
                    await self.unregister(websocket)
                    break
        except asyncio.CancelledError:
            pass

    async def flush(self) -> None:
        """Wait until every queued frame has been handed to its socket."""
        async with self._lock:
            queues = [data['queue'] for data in self.clients.values()]
        for q in queues:
            await q.join()

    @staticmethod
    def _is_open(websocket: ServerConnection) -> bool:
        return websocket.state is State.OPEN

    def is_registered(self, websocket: ServerConnection) -> bool:
        """Check whether a connection is currently registered."""
        return websocket in self.clients

    def get_client_count(self) -> int:
        """
        Get the number of connected clients.

        Returns:
            Number of connected clients
        """
        return len(self.clients)

    async def close_all(self) -> None:
        """Close all client connections."""
        async with self._lock:
            websockets = list(self.clients.keys())

        for ws in websockets:
            await self.unregister(ws)
            try:
                await ws.close()
            except Exception as e:
                logger.debug(f"Error closing client connection: {e}")

        logger.info("All clients disconnected")
