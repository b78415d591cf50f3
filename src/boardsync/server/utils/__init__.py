"""
Utilities package for the board synchronization server.
"""

from .debouncer import DebouncedSnapshotWriter, PendingSnapshot

__all__ = [
    "DebouncedSnapshotWriter",
    "PendingSnapshot",
]
