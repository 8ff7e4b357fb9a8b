"""In-memory player directory."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Hashable

from ..messages import Message


@dataclass
class Player:
    """A connected player. Messages sent to the player are kept for inspection."""
    id: Hashable
    name: str
    messages: list[str] = field(default_factory=list)

    def send_message(self, template: str, *args):
        self.messages.append(Message.format(template, *args) if args else template)

    def clear_messages(self):
        self.messages.clear()


class PlayerManager:
    """Tracks connected players by ID."""

    def __init__(self):
        self._players: dict[Hashable, Player] = {}

    def connect(self, player_id: Hashable, name: str) -> Player:
        player = Player(id=player_id, name=name)
        self._players[player_id] = player
        return player

    def disconnect(self, player_id: Hashable) -> Player | None:
        return self._players.pop(player_id, None)

    def get_by_id(self, player_id: Hashable) -> Player | None:
        return self._players.get(player_id)

    def __iter__(self):
        return iter(list(self._players.values()))

    def __len__(self) -> int:
        return len(self._players)
