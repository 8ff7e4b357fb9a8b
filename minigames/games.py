"""
Games - The interface features use to offer minigames on the server.

Provides the ability for players to start a game or challenge particular other
players to one, keeps track of the players in each game, and considers a game
finished when either everyone leaves or the game signals that there's a
winner.

Usage:
    games = Games(players=players, announce=announce, dialogs=dialogs)

    games.register_game(RaceGame, {
        "name": "Race",
        "goal": "Complete the race track in the shortest possible time.",
        "command": "race",
        "minimum_players": 1,
        "maximum_players": 4,
        "settings": [
            Setting("races", "race_id", SettingType.NUMBER, -1, "Race ID"),
        ],
    })

    result = await games.commands.dispatch("race", player_id=0)
"""

from __future__ import annotations
from typing import Any, Callable, Hashable
import logging

from .collaborators import Announce, DialogService, ObjectManager, PlayerManager
from .commands import CommandRouter
from .config import Settings
from .customization import CustomizationEngine
from .description import GameDescriptor
from .registry import GameRegistry, ReloadObservers
from .session import Game, SessionManager

logger = logging.getLogger(__name__)


class Games:
    """
    Wires the registry, command router, session manager and customization
    engine together. Collaborators not given are created in-memory.
    """

    def __init__(
        self,
        settings=None,
        players=None,
        announce=None,
        dialogs=None,
        objects=None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.players = players if players is not None else PlayerManager()
        self.announce = announce if announce is not None else Announce()
        self.dialogs = dialogs if dialogs is not None else DialogService()
        self.objects = objects if objects is not None else ObjectManager()

        # The registry keeps track of all the games that are available on the server.
        self.registry = GameRegistry()

        # Resolves the settings of a game before a session of it starts.
        self.customization = CustomizationEngine(self.dialogs, self.objects, self.settings)

        # Runs the sessions of every game.
        self.sessions = SessionManager(
            self.registry,
            self.customization,
            self.players,
            announce=self.announce,
            settings=self.settings,
        )

        # Implements the commands with which players can start and stop games.
        self.commands = CommandRouter(self.registry, self.sessions, self.customization, self.players)

        self._reload_observers = ReloadObservers()

    # ---------------------------------------------------------------------------------------------

    def register_game(
        self,
        game_class: type[Game],
        options: dict[str, Any],
        identity: Hashable | None = None,
    ) -> GameDescriptor:
        """
        Registers `game_class`, which will power the game declaratively defined
        in `options`. The identity defaults to the class itself.
        """
        descriptor = GameDescriptor.create(game_class, options, identity=identity)
        self.registry.register_game(descriptor)
        return descriptor

    async def remove_game(self, identity: Hashable, stop_sessions: bool = True) -> GameDescriptor:
        """
        Removes the game registered as `identity`. In-progress sessions are
        stopped immediately unless `stop_sessions` is False, in which case
        they run to completion.
        """
        descriptor = self.registry.remove_game(identity)
        if stop_sessions:
            stopped = await self.sessions.stop_sessions(identity)
            if stopped:
                logger.info("Stopped %d session(s) of %s", stopped, descriptor.name)
        return descriptor

    # ---------------------------------------------------------------------------------------------

    def add_reload_observer(self, owner: Hashable, callback: Callable[[], Any]):
        """Calls `callback` whenever the games capability reloads, so `owner` can re-register."""
        self._reload_observers.add(owner, callback)

    def remove_reload_observer(self, owner: Hashable) -> bool:
        return self._reload_observers.remove(owner)

    def reload(self) -> int:
        """
        Drops every registration and asks reload observers to register again.
        Running sessions continue with the descriptors they were created from.

        Returns the number of games registered afterwards.
        """
        for descriptor in self.registry.games:
            self.registry.remove_game(descriptor.identity)

        self._reload_observers.notify_reload()
        return len(self.registry)

    # ---------------------------------------------------------------------------------------------

    def dispose(self):
        self.sessions.dispose()
        self.registry.dispose()
        self._reload_observers.clear()
