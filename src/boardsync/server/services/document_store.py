"""
Document store for the shared board.

This service owns the single resident board. Every mutation goes through
load() and replace(); nothing else holds a reference that it mutates
outside a handler.
"""

import logging
from typing import Optional

from ..board_helpers import Board, empty_board
from ..constants import BoardKeys
from ..utils.debouncer import DebouncedSnapshotWriter

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Service holding the authoritative board.

    Provides operations for:
    - Lazily restoring the board from its snapshot on first access
    - Replacing the board and scheduling a best-effort snapshot
    - Reporting simple board statistics
    """

    def __init__(self, writer: Optional[DebouncedSnapshotWriter] = None):
        """
        Initialize document store.

        Args:
            writer: Snapshot writer, or None to run purely in memory
        """
        self.writer = writer
        self._board: Optional[Board] = None
        self.logger = logging.getLogger(f"{__name__}.DocumentStore")

    def load(self) -> Board:
        """
        Return the resident board, restoring it on first access.

        Never fails: a missing or corrupt snapshot yields an empty board.
        """
        if self._board is not None:
            return self._board

        board = self.writer.store.restore() if self.writer else None
        if board is None:
            board = empty_board()
            self._board = board
            # Create the data file up front so operators can see where state lives
            self._snapshot()
        else:
            self._board = board
        return self._board

    def replace(self, board: Board) -> None:
        """
        Make board the resident board and schedule a snapshot.

        Overwrites resident state unconditionally; no merge.
        """
        self._board = board
        self._snapshot()

    def _snapshot(self) -> None:
        if self.writer is None:
            return
        self.writer.schedule(self._board)

    def task_count(self) -> int:
        """Number of tasks on the board."""
        return len(self.load()[BoardKeys.TASKS])

    def member_count(self) -> int:
        """Number of team members on the board."""
        return len(self.load()[BoardKeys.TEAM_MEMBERS])
