"""
Constants for the board synchronization server.

This module centralizes message type tags, default values and tuning
knobs used throughout the store, handlers and WebSocket layer.
"""


class EventConstants:
    """Constants for event handling, persistence and transport."""

    # Network defaults
    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 3000
    HEALTH_PATH = "/healthz"

    # Persistence
    DEFAULT_DATA_FILE = "board-data.json"
    SNAPSHOT_DELAY_SECONDS = 0.1  # coalesce bursts of mutations into one write
    SNAPSHOT_INDENT = 2

    # Per-client outbound queue; frames beyond this are dropped for that client
    CLIENT_QUEUE_SIZE = 1000

    # Environment variables
    ENV_PORT = "PORT"
    ENV_DATA_FILE = "BOARD_DATA_FILE"


class BoardKeys:
    """Top-level keys of the board document and well-known payload fields."""
    TASKS = "tasks"
    TEAM_MEMBERS = "teamMembers"

    TASK_ID = "id"
    TASK_STATUS = "status"
    TASK_COMMENTS = "comments"
    COMMENT_TASK_ID = "taskId"
    COMMENT = "comment"
    MEMBER_NAME = "name"


class ClientMessage:
    """Message types sent by clients."""
    ADD_TASK = "ADD_TASK"
    UPDATE_TASK = "UPDATE_TASK"
    DELETE_TASK = "DELETE_TASK"
    MOVE_TASK = "MOVE_TASK"
    ADD_COMMENT = "ADD_COMMENT"
    UPDATE_TEAM_MEMBER = "UPDATE_TEAM_MEMBER"
    USER_ACTIVITY = "USER_ACTIVITY"


class ServerMessage:
    """Message types sent by the server."""
    INIT = "INIT"
    TASK_ADDED = "TASK_ADDED"
    TASK_UPDATED = "TASK_UPDATED"
    TASK_DELETED = "TASK_DELETED"
    TASK_MOVED = "TASK_MOVED"
    COMMENT_ADDED = "COMMENT_ADDED"
    TEAM_UPDATED = "TEAM_UPDATED"
    USER_ACTIVITY = "USER_ACTIVITY"
