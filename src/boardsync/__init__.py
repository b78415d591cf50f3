"""
boardsync: real-time synchronization hub for a shared task board.
"""

__version__ = "0.1.0"
