"""
Structural payload schemas for client messages.

Only the keys the server itself looks up are described here. Everything
else in a payload is opaque and passed through untouched.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..constants import BoardKeys, ClientMessage


@dataclass
class PayloadSchema:
    """
    Schema definition for a message payload.

    Attributes:
        required: Keys the handler reads from the payload
        requires_object: Whether the payload must be a JSON object at all
    """
    required: List[str] = None
    requires_object: bool = True

    def __post_init__(self):
        if self.required is None:
            self.required = []


ADD_TASK_SCHEMA = PayloadSchema(required=[BoardKeys.TASK_ID])
UPDATE_TASK_SCHEMA = PayloadSchema(required=[BoardKeys.TASK_ID])
DELETE_TASK_SCHEMA = PayloadSchema(required=[BoardKeys.TASK_ID])
MOVE_TASK_SCHEMA = PayloadSchema(required=[BoardKeys.TASK_ID, BoardKeys.TASK_STATUS])
ADD_COMMENT_SCHEMA = PayloadSchema(required=[BoardKeys.COMMENT_TASK_ID, BoardKeys.COMMENT])
UPDATE_TEAM_MEMBER_SCHEMA = PayloadSchema(required=[BoardKeys.MEMBER_NAME])

# Activity payloads are relayed as-is (presence, typing indicators, ...)
USER_ACTIVITY_SCHEMA = PayloadSchema(requires_object=False)


PAYLOAD_SCHEMAS: Dict[str, PayloadSchema] = {
    ClientMessage.ADD_TASK: ADD_TASK_SCHEMA,
    ClientMessage.UPDATE_TASK: UPDATE_TASK_SCHEMA,
    ClientMessage.DELETE_TASK: DELETE_TASK_SCHEMA,
    ClientMessage.MOVE_TASK: MOVE_TASK_SCHEMA,
    ClientMessage.ADD_COMMENT: ADD_COMMENT_SCHEMA,
    ClientMessage.UPDATE_TEAM_MEMBER: UPDATE_TEAM_MEMBER_SCHEMA,
    ClientMessage.USER_ACTIVITY: USER_ACTIVITY_SCHEMA,
}


def get_schema(message_type: str) -> Optional[PayloadSchema]:
    """Look up the payload schema for a message type."""
    return PAYLOAD_SCHEMAS.get(message_type)
