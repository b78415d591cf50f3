"""
Server module for the shared task board.

This module provides:
- The authoritative in-memory board and its best-effort snapshots
- Routing of client messages to mutation handlers
- Fan-out of the resulting events over WebSocket
"""

from .api import BoardServer

__all__ = ["BoardServer"]
