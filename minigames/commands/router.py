"""
Command Router - Maps player commands to registered games.

Every registered game with a command gets exactly one binding here. The
registry binds and unbinds commands as games come and go; the router only
ever resolves them. Invoking a game's command joins or creates a session, and
a handful of sub-commands are available on every game command:

    /<command>                     sign up for the game
    /<command> start               start the session now, with default settings
    /<command> custom              start the session now, choosing settings first
    /<command> ready               mark yourself ready to start
    /<command> challenge [ids]     play against the given players right away
    /<command> leave               leave the game
    /<command> cancel              cancel whatever you are choosing right now

Games without a command of their own are reachable through the catalogue:

    /games                         list the available games
    /games <number>                sign up for the numbered game
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Hashable, Sequence
import logging

from ..description import GameDescriptor
from ..errors import CommandConflictError, NotFoundError, PlayerFacingError, NotParticipatingError
from ..messages import Message
from ..registry import GameRegistry
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)

CATALOGUE_COMMAND = "games"
RESERVED_COMMANDS = frozenset({CATALOGUE_COMMAND})


@dataclass
class DispatchResult:
    """Outcome of a command invocation."""
    handled: bool
    message: str | None = None
    session: Session | None = None


class CommandRouter:
    """
    Usage:
        router = CommandRouter(registry, sessions, customization, players)
        result = await router.dispatch("race", player_id=3)
    """

    def __init__(self, registry: GameRegistry, sessions: SessionManager, customization, players):
        self._registry = registry
        self._sessions = sessions
        self._customization = customization
        self._players = players

        self._bindings: dict[str, Hashable] = {}
        self._reserved = set(RESERVED_COMMANDS)
        # Commands whose game went away. Players still get told about them.
        self._retired: set[str] = set()

        registry.attach_command_binder(self)

    # =========================================================================
    # Bindings
    # =========================================================================

    def bind(self, command: str, identity: Hashable):
        if command in self._bindings or command in self._reserved:
            raise CommandConflictError(command)
        self._bindings[command] = identity
        self._retired.discard(command)
        logger.debug("Bound /%s", command)

    def unbind(self, command: str):
        if command not in self._bindings:
            raise NotFoundError(command)
        del self._bindings[command]
        self._retired.add(command)
        logger.debug("Unbound /%s", command)

    @property
    def commands_for_testing(self) -> set[str]:
        return set(self._bindings)

    def is_bound(self, command: str) -> bool:
        return command in self._bindings or command in self._reserved

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def dispatch(
        self,
        command: str,
        player_id: Hashable,
        arguments: Sequence[str] = (),
    ) -> DispatchResult:
        """Handle `/command arguments...` issued by `player_id`."""
        player = self._players.get_by_id(player_id)
        if player is None:
            return DispatchResult(False, Message.format(Message.GAME_UNKNOWN_PLAYER, player_id))

        command = command.lower().lstrip("/")
        if command == CATALOGUE_COMMAND:
            return await self._dispatch_catalogue(player, arguments)

        identity = self._bindings.get(command)
        if identity is None:
            message = Message.format(Message.GAME_UNKNOWN_COMMAND, command)
            if command in self._retired:
                return self._reply(player, message)
            return DispatchResult(False, message)

        # The binding is removed together with the registration, but the game
        # may still have gone away if this invocation waited in a queue.
        descriptor = self._registry.get_game(identity)
        if descriptor is None:
            return self._reply(player, Message.format(Message.GAME_UNAVAILABLE, command))

        return await self._dispatch_game(player, descriptor, arguments)

    async def _dispatch_game(self, player, descriptor: GameDescriptor, arguments: Sequence[str]) -> DispatchResult:
        action = arguments[0].lower() if arguments else None
        try:
            if action is None:
                session, _ = self._sessions.join_or_create(descriptor, player.id)
                return DispatchResult(True, None, session)
            if action == "cancel":
                return self._cancel(player)
            if action == "leave":
                return await self._leave(player, descriptor)
            if action in ("start", "custom"):
                return self._start(player, descriptor, interactive=action == "custom")
            if action == "ready":
                return self._ready(player, descriptor)
            if action == "challenge":
                return self._challenge(player, descriptor, arguments[1:])
        except PlayerFacingError as e:
            return self._reply(player, e.describe())

        return self._reply(player, Message.format(Message.GAME_USAGE, descriptor.command or CATALOGUE_COMMAND))

    def _cancel(self, player) -> DispatchResult:
        if self._customization.cancel(player.id):
            return self._reply(player, Message.GAME_CANCELLED)
        return self._reply(player, Message.GAME_NOTHING_TO_CANCEL)

    async def _leave(self, player, descriptor: GameDescriptor) -> DispatchResult:
        session = self._participating_session(player, descriptor)
        await self._sessions.leave(session, player.id)
        return self._reply(player, Message.format(Message.GAME_LEFT, descriptor.name))

    def _start(self, player, descriptor: GameDescriptor, interactive: bool) -> DispatchResult:
        session = self._participating_session(player, descriptor)
        self._sessions.ensure_startable(session, player.id)
        self._sessions.request_start(session, initiator_id=player.id, interactive=interactive)
        return DispatchResult(True, None, session)

    def _ready(self, player, descriptor: GameDescriptor) -> DispatchResult:
        session = self._participating_session(player, descriptor)
        self._sessions.mark_ready(session, player.id)
        return self._reply(player, Message.format(Message.GAME_READY, descriptor.name), session)

    def _challenge(self, player, descriptor: GameDescriptor, arguments: Sequence[str]) -> DispatchResult:
        opponents = []
        for argument in arguments:
            opponent = self._players.get_by_id(_parse_player_id(argument))
            if opponent is None:
                return self._reply(player, Message.format(Message.GAME_UNKNOWN_PLAYER, argument))
            opponents.append(opponent.id)

        session = self._sessions.challenge(descriptor, player.id, opponents)
        self._sessions.request_start(
            session, initiator_id=player.id, interactive=bool(descriptor.settings)
        )
        return DispatchResult(True, None, session)

    def _participating_session(self, player, descriptor: GameDescriptor) -> Session:
        session = self._sessions.find_session(descriptor.identity, player.id)
        if session is None:
            raise NotParticipatingError(descriptor.name)
        return session

    # =========================================================================
    # Catalogue
    # =========================================================================

    async def _dispatch_catalogue(self, player, arguments: Sequence[str]) -> DispatchResult:
        games = self._registry.games
        if not arguments:
            if not games:
                return self._reply(player, Message.GAME_CATALOGUE_EMPTY)
            player.send_message(Message.GAME_CATALOGUE_HEADER)
            for index, descriptor in enumerate(games, start=1):
                player.send_message(Message.GAME_CATALOGUE_ENTRY, index, descriptor.describe())
            return DispatchResult(True)

        try:
            index = int(arguments[0])
        except ValueError:
            index = 0
        if not 1 <= index <= len(games):
            return self._reply(player, Message.format(Message.GAME_CATALOGUE_INVALID, arguments[0]))

        return await self._dispatch_game(player, games[index - 1], arguments[1:])

    def _reply(self, player, message: str, session: Session | None = None) -> DispatchResult:
        player.send_message(message)
        return DispatchResult(True, message, session)


def _parse_player_id(argument: str) -> Hashable:
    try:
        return int(argument)
    except ValueError:
        return argument
