"""
Session Module - Manages ephemeral tracker sessions.

A session represents one play-through of a game:
- Created when the table sits down
- Owns the undoable state store
- Destroyed when the game ends

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
