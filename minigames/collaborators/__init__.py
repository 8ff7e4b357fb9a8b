"""
Collaborators - Interfaces the minigames core consumes from the server.

The core never reaches into global state. Every component receives the
collaborators it needs at construction. The protocols below describe the
narrow surface that is used; the in-memory implementations in this package
back the HTTP service and the tests.
"""

from __future__ import annotations
from typing import Any, Hashable, Optional, Protocol, Sequence

from .announce import Announce
from .dialogs import DialogService
from .objects import ObjectManager
from .players import Player, PlayerManager


class SettingsProvider(Protocol):
    def get_value(self, key: str) -> Any:
        ...


class PlayerLike(Protocol):
    id: Hashable
    name: str

    def send_message(self, template: str, *args) -> None:
        ...


class PlayerDirectory(Protocol):
    def get_by_id(self, player_id: Hashable) -> Optional[PlayerLike]:
        ...


class AnnounceSink(Protocol):
    def announce(self, template: str, *args) -> None:
        ...

    def echo(self, tag: str, *payload) -> None:
        ...


class Dialogs(Protocol):
    async def prompt(
        self,
        player: PlayerLike,
        title: str,
        items: Sequence[str] | None = None,
        message: str | None = None,
    ) -> Any:
        """Return the chosen item index, the entered text, or None when dismissed."""
        ...

    def accept_responses(self, player_id: Hashable):
        ...

    def discard(self, player_id: Hashable):
        ...


class WorldObjects(Protocol):
    def create_marker(self, player: PlayerLike, label: str) -> int:
        ...

    def dispose(self, handle: int) -> None:
        ...


__all__ = [
    "Announce",
    "AnnounceSink",
    "DialogService",
    "Dialogs",
    "ObjectManager",
    "Player",
    "PlayerDirectory",
    "PlayerLike",
    "PlayerManager",
    "SettingsProvider",
    "WorldObjects",
]
