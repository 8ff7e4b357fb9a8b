"""
Session Module - Manages running instances of games.

A session represents one play-through of a game:
- Created when a player signs up for a game without an open signup,
  or when a player challenges others
- Collects players until its start condition fires
- Resolves its configuration once, when it becomes active
- Released when the game finishes or the signup is aborted

Sessions are in-memory only. Game specific data (scores, checkpoints) is the
business of the game implementation.
"""

from .game import Game
from .manager import SessionManager
from .session import Session, SessionState

__all__ = [
    "Game",
    "SessionManager",
    "Session",
    "SessionState",
]
