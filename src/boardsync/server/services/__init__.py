"""
Services package for the board synchronization server.

This package contains the stateful services behind the handlers:
- DocumentStore: the authoritative in-memory board
- SnapshotStore: best-effort snapshot persistence
"""

from .document_store import DocumentStore
from .persistence import SnapshotStore

__all__ = [
    "DocumentStore",
    "SnapshotStore",
]
