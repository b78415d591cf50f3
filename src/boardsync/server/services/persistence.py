"""
Best-effort snapshot persistence for the board.

The in-memory board is always the source of truth. This module only
mirrors it to a JSON file so a restarted process can pick up where it
left off. Every failure is logged and swallowed: on read-only or
ephemeral storage the server simply keeps running from memory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..board_helpers import Board
from ..constants import BoardKeys, EventConstants

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Reads and writes whole-board snapshots to a single JSON file.

    No locking, versioning or atomic rename: the last write wins.
    """

    def __init__(self, path: Path, indent: int = EventConstants.SNAPSHOT_INDENT):
        """
        Initialize snapshot store.

        Args:
            path: Location of the snapshot file
            indent: JSON indentation used when writing
        """
        self.path = Path(path)
        self.indent = indent
        self.logger = logging.getLogger(f"{__name__}.SnapshotStore")

    def restore(self) -> Optional[Board]:
        """
        Load the persisted board.

        Returns:
            The board, or None if the file is missing, unreadable or malformed
        """
        if not self.path.exists():
            self.logger.info(f"No snapshot at {self.path}, starting with an empty board")
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            self.logger.error(f"Error loading snapshot {self.path}: {e}")
            return None

        board = self._coerce_board(data)
        if board is None:
            self.logger.error(f"Snapshot {self.path} is not a board document, ignoring it")
            return None

        self.logger.info(
            f"Loaded snapshot from {self.path} "
            f"({len(board[BoardKeys.TASKS])} tasks, {len(board[BoardKeys.TEAM_MEMBERS])} members)"
        )
        return board

    def encode(self, board: Board) -> Optional[str]:
        """
        Serialize a board to snapshot text.

        Returns:
            JSON text, or None if the board holds non-serializable values
        """
        try:
            return json.dumps(board, indent=self.indent)
        except (TypeError, ValueError) as e:
            self.logger.error(f"Failed to serialize board snapshot: {e}")
            return None

    def write(self, text: str) -> bool:
        """
        Overwrite the snapshot file with already-serialized text.

        Safe to call from a worker thread.

        Returns:
            True if the file was written
        """
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            self.logger.warning(f"Snapshot write to {self.path} failed, board kept in memory only: {e}")
            return False
        self.logger.debug(f"Snapshot written to {self.path}")
        return True

    def snapshot(self, board: Board) -> bool:
        """
        Serialize and write a board.

        Returns:
            True on success; failures are logged, never raised
        """
        text = self.encode(board)
        if text is None:
            return False
        return self.write(text)

    @staticmethod
    def _coerce_board(data: Any) -> Optional[Board]:
        """Validate the top-level shape of a loaded snapshot."""
        if not isinstance(data, dict):
            return None
        tasks = data.setdefault(BoardKeys.TASKS, [])
        members = data.setdefault(BoardKeys.TEAM_MEMBERS, [])
        if not isinstance(tasks, list) or not isinstance(members, list):
            return None
        return data
