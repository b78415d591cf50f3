"""
Base classes and decorators for message handlers.

This module provides the foundation for mutation handling including:
- MutationResult: Standardized return type for handlers
- Decorators for payload checks, broadcasting, and error handling
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from functools import wraps
import logging

from ..validation import validate_payload
from ...websocket.serializers import create_message

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    """
    Standardized result from message handlers.

    A result either carries a message to broadcast or the reason the
    request was dropped. Dropped requests are never reported to clients.
    """
    success: bool
    message: Optional[Dict[str, Any]] = None
    exclude_sender: bool = False
    reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def broadcast(cls, msg_type: str, payload: Any, exclude_sender: bool = False, **metadata) -> "MutationResult":
        """Create a result that fans msg_type/payload out to clients."""
        return cls(
            success=True,
            message=create_message(msg_type, payload),
            exclude_sender=exclude_sender,
            metadata=metadata,
        )

    @classmethod
    def skipped(cls, reason: str, **metadata) -> "MutationResult":
        """Create a result for a request that changed nothing."""
        return cls(success=False, reason=reason, metadata=metadata)

    def with_metadata(self, **metadata) -> "MutationResult":
        """Add metadata to result (builder pattern)."""
        self.metadata.update(metadata)
        return self

    def __bool__(self):
        return self.success


def broadcast_result(func: Callable) -> Callable:
    """
    Decorator to deliver a successful MutationResult to connected clients.

    Expects the handler method to be on a class with a _broadcast() method
    and to be called as handler(payload, websocket).
    """
    @wraps(func)
    async def wrapper(self, payload: Any, websocket: Any = None, *args, **kwargs):
        result = await func(self, payload, websocket, *args, **kwargs)

        if isinstance(result, MutationResult) and result.success and result.message:
            exclude = websocket if result.exclude_sender else None
            await self._broadcast(result.message, exclude=exclude)

        return result

    return wrapper


def check_payload(message_type: str):
    """
    Decorator to drop payloads that lack the keys a handler looks up.

    Usage:
        @check_payload("MOVE_TASK")
        async def handle_move_task(self, payload, websocket):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, payload: Any, *args, **kwargs):
            result = validate_payload(message_type, payload)

            if not result:
                logger.warning(f"Dropping {message_type}: {'; '.join(result.errors)}")
                return MutationResult.skipped("invalid_payload", errors=result.errors)

            return await func(self, payload, *args, **kwargs)

        return wrapper

    return decorator


def handle_exceptions(func: Callable) -> Callable:
    """
    Decorator to catch and convert exceptions into skipped results.

    Prevents one bad message from tearing down the client connection.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.exception(f"Exception in {func.__name__}: {e}")
            return MutationResult.skipped(
                "exception",
                exception_type=type(e).__name__,
                error=str(e),
            )

    return wrapper


class BaseMutationHandler:
    """
    Base class for message handlers.

    Provides common functionality for all specialized handlers:
    - Board access through the document store
    - Broadcasting helpers
    """

    def __init__(self, server):
        """
        Initialize handler with reference to main server.

        Args:
            server: BoardServer instance providing the store and broadcasting
        """
        self.server = server
        self.store = server.store
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def _broadcast(self, message: Dict[str, Any], exclude: Any = None) -> None:
        """Broadcast a message if the WebSocket server is running."""
        websocket_server = self.server.websocket_server
        if websocket_server and websocket_server.is_running():
            await websocket_server.broadcast(message, exclude=exclude)
