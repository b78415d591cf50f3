"""
Task message handler for the board server.

Handles all task-related messages including:
- Task creation, wholesale update and deletion
- Column moves (status changes)
- Comments appended to a task
"""

import logging
from typing import Any, Dict

from .base import (
    BaseMutationHandler,
    MutationResult,
    broadcast_result,
    check_payload,
    handle_exceptions,
)
from ..board_helpers import BoardMutator
from ..constants import BoardKeys, ClientMessage, ServerMessage

logger = logging.getLogger(__name__)


class TaskMutationHandler(BaseMutationHandler):
    """
    Handler for task-related messages.

    Every successful mutation is committed with DocumentStore.replace()
    before it is broadcast to all clients, the sender included. Requests
    that reference a task that does not exist (never created, or deleted
    concurrently by another client) are dropped silently.
    """

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.ADD_TASK)
    async def handle_add_task(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """
        Append a new task to the board.

        Args:
            payload: Task document; must carry an id not yet on the board
            websocket: Originating connection

        Returns:
            MutationResult broadcasting TASK_ADDED
        """
        board = self.store.load()
        if not BoardMutator.add_task(board, payload):
            self.logger.warning(f"Ignoring ADD_TASK for existing task id {payload[BoardKeys.TASK_ID]!r}")
            return MutationResult.skipped("duplicate_id", task_id=payload[BoardKeys.TASK_ID])

        self.store.replace(board)
        self.logger.debug(f"Task added: {payload[BoardKeys.TASK_ID]!r}")
        return MutationResult.broadcast(ServerMessage.TASK_ADDED, payload)

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.UPDATE_TASK)
    async def handle_update_task(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """Replace an existing task wholesale with the payload."""
        board = self.store.load()
        if not BoardMutator.update_task(board, payload):
            self.logger.debug(f"UPDATE_TASK for unknown task {payload[BoardKeys.TASK_ID]!r}, ignoring")
            return MutationResult.skipped("task_not_found", task_id=payload[BoardKeys.TASK_ID])

        self.store.replace(board)
        return MutationResult.broadcast(ServerMessage.TASK_UPDATED, payload)

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.DELETE_TASK)
    async def handle_delete_task(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """
        Remove every task with the payload's id.

        TASK_DELETED is broadcast even when nothing matched, so clients
        holding a stale copy of the task drop it too.
        """
        board = self.store.load()
        removed = BoardMutator.delete_task(board, payload[BoardKeys.TASK_ID])

        self.store.replace(board)
        return MutationResult.broadcast(ServerMessage.TASK_DELETED, payload, removed=removed)

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.MOVE_TASK)
    async def handle_move_task(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """Move a task to another column by setting its status."""
        board = self.store.load()
        task_id = payload[BoardKeys.TASK_ID]
        if not BoardMutator.move_task(board, task_id, payload[BoardKeys.TASK_STATUS]):
            self.logger.debug(f"MOVE_TASK for unknown task {task_id!r}, ignoring")
            return MutationResult.skipped("task_not_found", task_id=task_id)

        self.store.replace(board)
        return MutationResult.broadcast(ServerMessage.TASK_MOVED, payload)

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.ADD_COMMENT)
    async def handle_add_comment(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """Append payload["comment"] to the task named by payload["taskId"]."""
        board = self.store.load()
        task_id = payload[BoardKeys.COMMENT_TASK_ID]
        if not BoardMutator.add_comment(board, task_id, payload[BoardKeys.COMMENT]):
            self.logger.debug(f"ADD_COMMENT for unknown task {task_id!r}, ignoring")
            return MutationResult.skipped("task_not_found", task_id=task_id)

        self.store.replace(board)
        return MutationResult.broadcast(ServerMessage.COMMENT_ADDED, payload)
