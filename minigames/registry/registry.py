"""
Game Registry - The authoritative table of registered games.

The registry keeps two mappings:
- identity -> GameDescriptor (one entry per identity)
- command  -> identity (a command resolves to at most one identity)

Every command in the table has a live binding in the command router. The
binding is made before the table entry is written and removed together with
it, so players can never invoke a command without a descriptor behind it.
"""

from __future__ import annotations
from typing import Any, Hashable, Protocol
import logging

from ..description import GameDescriptor
from ..errors import DuplicateCommandError, DuplicateIdentityError, NotFoundError
from .observers import ObserverList

logger = logging.getLogger(__name__)


class CommandBinder(Protocol):
    def bind(self, command: str, identity: Hashable) -> None:
        ...

    def unbind(self, command: str) -> None:
        ...


class GameRegistry:
    """
    Registry of the games available on the server.

    Observers may implement `on_game_registered(descriptor)` and
    `on_game_removed(descriptor)`.
    """

    def __init__(self):
        self._games: dict[Hashable, GameDescriptor] = {}
        self._commands: dict[str, Hashable] = {}
        self._binder: CommandBinder | None = None
        self._observers = ObserverList()

    def attach_command_binder(self, binder: CommandBinder):
        if self._binder is not None:
            raise RuntimeError("A command binder has already been attached")
        if self._commands:
            raise RuntimeError("The command binder must be attached before games are registered")
        self._binder = binder

    # =========================================================================
    # Mutation
    # =========================================================================

    def register_game(self, descriptor: GameDescriptor):
        """
        Register the game described by `descriptor`.

        Raises DuplicateIdentityError when the identity is taken,
        DuplicateCommandError when another game owns the command, and lets
        CommandConflictError from the router propagate. The table is
        unchanged when any of these is raised.
        """
        identity = descriptor.identity
        if identity in self._games:
            raise DuplicateIdentityError(identity)

        command = descriptor.command
        if command is not None:
            if command in self._commands:
                raise DuplicateCommandError(command, self._commands[command])
            if self._binder is not None:
                self._binder.bind(command, identity)
            self._commands[command] = identity

        self._games[identity] = descriptor
        logger.info("Registered game %s (command: %s)", descriptor.name, command or "none")

        self._observers.notify("on_game_registered", descriptor)

    def remove_game(self, identity: Hashable) -> GameDescriptor:
        """
        Remove the game registered under `identity` and return its descriptor.

        Running sessions are not affected; stopping them is up to the caller.
        Raises NotFoundError when nothing is registered under `identity`.
        """
        descriptor = self._games.get(identity)
        if descriptor is None:
            raise NotFoundError(identity)

        command = descriptor.command
        if command is not None:
            if self._binder is not None:
                self._binder.unbind(command)
            del self._commands[command]

        del self._games[identity]
        logger.info("Removed game %s", descriptor.name)

        self._observers.notify("on_game_removed", descriptor)
        return descriptor

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_game(self, identity: Hashable) -> GameDescriptor | None:
        return self._games.get(identity)

    def get_game_by_command(self, command: str) -> GameDescriptor | None:
        identity = self._commands.get(command)
        if identity is None:
            return None
        return self._games.get(identity)

    @property
    def games(self) -> list[GameDescriptor]:
        """Registered games, ordered by name."""
        return sorted(self._games.values(), key=lambda descriptor: descriptor.name.lower())

    @property
    def commands(self) -> dict[str, Hashable]:
        return dict(self._commands)

    def __contains__(self, identity: Hashable) -> bool:
        return identity in self._games

    def __len__(self) -> int:
        return len(self._games)

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(self, owner: Hashable, observer: Any):
        self._observers.add(owner, observer)

    def remove_observer(self, owner: Hashable) -> bool:
        return self._observers.remove(owner)

    def dispose(self):
        for identity in list(self._games):
            self.remove_game(identity)
        self._observers.clear()
