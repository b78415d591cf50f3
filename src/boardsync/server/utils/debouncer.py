"""
Debounced snapshot writing.

Mutations can arrive in rapid bursts (a client dragging a card across
several columns, a batch import). Writing the whole board to disk for
each of them would be wasteful and, done on the event loop, would stall
message processing. This module collects snapshot requests and writes
only the latest board after a quiet period, off the event loop.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..board_helpers import Board
from ..constants import EventConstants
from ..services.persistence import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass
class PendingSnapshot:
    """
    Container for a requested snapshot.

    Attributes:
        board: Board to persist (serialized when the write starts)
        requested_at: Time of the first request since the last write
        last_update: Time of the most recent request
    """
    board: Board
    requested_at: float
    last_update: float


class DebouncedSnapshotWriter:
    """
    Coalesces snapshot requests into trailing writes.

    A single background task performs the writes, so two writes never
    touch the file at the same time and the last requested board always
    ends up on disk.

    Usage:
        writer = DebouncedSnapshotWriter(SnapshotStore(path), delay=0.1)

        writer.schedule(board)   # from inside the event loop
        writer.schedule(board)   # coalesced with the previous request

        await writer.flush()     # wait until the file is up to date
    """

    def __init__(self, store: SnapshotStore, delay: float = EventConstants.SNAPSHOT_DELAY_SECONDS):
        """
        Initialize writer.

        Args:
            store: Snapshot store that performs the actual I/O
            delay: Quiet period in seconds before a write starts
        """
        self.store = store
        self.delay = delay
        self.pending: Optional[PendingSnapshot] = None
        self.writes_completed = 0
        self.writes_failed = 0
        self._task: Optional[asyncio.Task] = None
        self.logger = logging.getLogger(f"{__name__}.DebouncedSnapshotWriter")

    def schedule(self, board: Board) -> None:
        """
        Request a snapshot of the board.

        Inside a running event loop the write happens later in the
        background. Without a loop (startup, scripts) it happens now.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._record(self.store.snapshot(board))
            return

        now = time.time()
        if self.pending is None:
            self.pending = PendingSnapshot(board=board, requested_at=now, last_update=now)
        else:
            self.pending.board = board
            self.pending.last_update = now

        if self._task is None or self._task.done():
            self._task = loop.create_task(self._write_loop())

    async def _write_loop(self) -> None:
        """Write pending snapshots until no request is outstanding."""
        while self.pending is not None:
            await asyncio.sleep(self.delay)

            pending, self.pending = self.pending, None
            if pending is None:
                continue

            # Serialize on the loop thread so no handler mutates the board mid-dump
            text = self.store.encode(pending.board)
            if text is None:
                self._record(False)
                continue

            try:
                ok = await asyncio.to_thread(self.store.write, text)
            except Exception as e:
                self.logger.exception(f"Unexpected error writing snapshot: {e}")
                ok = False
            self._record(ok)

            self.logger.debug(
                f"Snapshot flushed (age: {time.time() - pending.requested_at:.3f}s)"
            )

    def _record(self, ok: bool) -> None:
        if ok:
            self.writes_completed += 1
        else:
            self.writes_failed += 1

    async def flush(self) -> None:
        """Wait until every requested snapshot has been written."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    def is_pending(self) -> bool:
        """Check whether a snapshot is waiting to be written."""
        return self.pending is not None or (self._task is not None and not self._task.done())
