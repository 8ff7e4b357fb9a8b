"""
Game Descriptor - Immutable, validated description of a registrable game.

A descriptor pairs an opaque identity (by default the game's class) with the
declarative metadata a feature registered it with. Sessions keep the
descriptor they were created from, so a game can be removed or re-registered
while sessions of the previous registration are still running.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Hashable, Optional, TYPE_CHECKING

from ..errors import DescriptorValidationError
from .setting import Setting
from .validation import validate_options

if TYPE_CHECKING:
    from ..session.game import Game


@dataclass(frozen=True)
class GameDescriptor:
    """
    Declarative metadata of one game.

    Usage:
        descriptor = GameDescriptor.create(RaceGame, {
            "name": "Race",
            "command": "race",
            "minimum_players": 1,
            "maximum_players": 4,
        })
    """
    identity: Hashable
    game_class: type[Game]
    name: str
    command: Optional[str] = None
    goal: Optional[str] = None
    minimum_players: int = 1
    maximum_players: int = 4
    price: int = 0
    settings: tuple[Setting, ...] = ()

    @classmethod
    def create(
        cls,
        game_class: type[Game],
        options: dict[str, Any],
        identity: Hashable | None = None,
    ) -> GameDescriptor:
        """
        Validate `options` and build the descriptor.

        Raises DescriptorValidationError listing every problem found.
        """
        result = validate_options(game_class, options)
        if not result.valid:
            raise DescriptorValidationError(result.errors)

        return cls(
            identity=game_class if identity is None else identity,
            game_class=game_class,
            name=options["name"].strip(),
            command=options.get("command"),
            goal=options.get("goal"),
            minimum_players=options.get("minimum_players", 1),
            maximum_players=options.get("maximum_players", 4),
            price=options.get("price", 0),
            settings=tuple(options.get("settings", ()) or ()),
        )

    def get_setting(self, identifier: str) -> Setting | None:
        for setting in self.settings:
            if setting.identifier == identifier:
                return setting
        return None

    def describe(self) -> str:
        """One-line summary shown in the game catalogue."""
        if self.minimum_players == self.maximum_players:
            players = f"{self.minimum_players} player(s)"
        else:
            players = f"{self.minimum_players}-{self.maximum_players} players"

        summary = f"{self.name} ({players}"
        if self.price:
            summary += f", ${self.price:,}"
        summary += ")"
        if self.command:
            summary += f" /{self.command}"
        return summary
