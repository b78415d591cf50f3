"""Serializers for the board's WebSocket message envelope."""

import json
from typing import Any, Dict, Union

from ..server.constants import ServerMessage


class ProtocolError(Exception):
    """Raised when an inbound frame cannot be decoded into a message."""


def create_message(msg_type: str, payload: Any) -> Dict[str, Any]:
    """
    Create a WebSocket message with a type and payload.

    Args:
        msg_type: Message type (INIT, TASK_ADDED, TEAM_UPDATED, etc.)
        payload: Message payload

    Returns:
        Message dictionary
    """
    return {
        'type': msg_type,
        'payload': payload,
    }


def create_init_message(board: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create an INIT message carrying the full board.

    Args:
        board: Board document ({tasks, teamMembers})

    Returns:
        Message dictionary
    """
    return create_message(ServerMessage.INIT, board)


def encode_message(message: Dict[str, Any]) -> str:
    """
    Serialize a message to a text frame.

    Raises:
        ProtocolError: If the message holds non-JSON values
    """
    try:
        return json.dumps(message)
    except (TypeError, ValueError, RecursionError) as e:
        raise ProtocolError(f"cannot encode message: {e}") from e


def decode_message(raw: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse an inbound frame into a message envelope.

    Args:
        raw: Text or binary frame received from a client

    Returns:
        Dictionary with at least a string 'type' key

    Raises:
        ProtocolError: If the frame is not a JSON object with a type tag
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ProtocolError(f"frame is not UTF-8: {e}") from e

    try:
        message = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"bad json: {e}") from e
    except RecursionError as e:
        # Pathologically nested arrays/objects exhaust the decoder's stack
        raise ProtocolError(f"json nested too deeply: {e}") from e

    if not isinstance(message, dict):
        raise ProtocolError(f"message must be an object, got {type(message).__name__}")

    msg_type = message.get('type')
    if not isinstance(msg_type, str) or not msg_type:
        raise ProtocolError("message has no type")

    return message
