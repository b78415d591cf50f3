"""
Team member and presence handlers for the board server.
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
from ..constants import ClientMessage, ServerMessage

logger = logging.getLogger(__name__)


class TeamMutationHandler(BaseMutationHandler):
    """
    Handler for team membership and user activity.

    Team members are upserted by name and never deleted. Activity signals
    (presence, typing, cursor focus) are relayed without touching the board.
    """

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.UPDATE_TEAM_MEMBER)
    async def handle_update_team_member(self, payload: Dict[str, Any], websocket: Any = None) -> MutationResult:
        """
        Insert or replace a team member.

        Returns:
            MutationResult broadcasting TEAM_UPDATED with the full member list
        """
        board = self.store.load()
        members = BoardMutator.upsert_team_member(board, payload)

        self.store.replace(board)
        return MutationResult.broadcast(ServerMessage.TEAM_UPDATED, members)

    @broadcast_result
    @handle_exceptions
    @check_payload(ClientMessage.USER_ACTIVITY)
    async def handle_user_activity(self, payload: Any, websocket: Any = None) -> MutationResult:
        """Relay an activity signal to everyone except its sender."""
        return MutationResult.broadcast(ServerMessage.USER_ACTIVITY, payload, exclude_sender=True)
