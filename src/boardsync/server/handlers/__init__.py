"""
Message handlers package for the board server.

This package contains specialized handlers for client messages,
organized by domain (tasks, team).
"""

from .base import MutationResult, BaseMutationHandler, broadcast_result, check_payload, handle_exceptions
from .task_handler import TaskMutationHandler
from .team_handler import TeamMutationHandler

__all__ = [
    "MutationResult",
    "BaseMutationHandler",
    "broadcast_result",
    "check_payload",
    "handle_exceptions",
    "TaskMutationHandler",
    "TeamMutationHandler",
]
