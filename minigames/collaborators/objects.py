"""Tracks transient world objects, such as selection markers."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Hashable
import itertools


@dataclass(frozen=True)
class Marker:
    handle: int
    player_id: Hashable
    label: str


class ObjectManager:
    def __init__(self):
        self._ids = itertools.count(1)
        self._markers: dict[int, Marker] = {}

    @property
    def count(self) -> int:
        """Number of live objects."""
        return len(self._markers)

    def create_marker(self, player, label: str) -> int:
        handle = next(self._ids)
        self._markers[handle] = Marker(handle=handle, player_id=player.id, label=label)
        return handle

    def dispose(self, handle: int):
        if self._markers.pop(handle, None) is None:
            raise KeyError(f"Unknown object handle: {handle}")
