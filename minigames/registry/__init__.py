"""
Registry Module - Tracks which games are available on the server.

Features register a game once with its declarative description. The registry
enforces that identities and commands are unique and tells observers when
games come and go.
"""

from .registry import GameRegistry, CommandBinder
from .observers import ObserverList, ReloadObservers

__all__ = [
    "GameRegistry",
    "CommandBinder",
    "ObserverList",
    "ReloadObservers",
]
