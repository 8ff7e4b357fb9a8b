"""
Session - One running (or pending) instance of a game.

States:
    SIGNUP   -> ACTIVE     the start condition fired and settings were resolved
    SIGNUP   -> ABORTED    everyone left, or the signup was cancelled
    ACTIVE   -> FINISHED   the game signalled completion, or everyone left

FINISHED and ABORTED are terminal. Only the SessionManager mutates a session;
everything else reads it through the properties below.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Hashable, Mapping, TYPE_CHECKING
import time
import uuid

from ..description import GameDescriptor
from ..errors import InvalidTransitionError

if TYPE_CHECKING:
    from .game import Game


class SessionState(Enum):
    """State of a game session."""
    SIGNUP = "signup"  # Collecting players
    ACTIVE = "active"  # Game in progress
    FINISHED = "finished"  # Game completed
    ABORTED = "aborted"  # Cancelled before it started


TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.SIGNUP: frozenset({SessionState.ACTIVE, SessionState.ABORTED}),
    SessionState.ACTIVE: frozenset({SessionState.FINISHED}),
    SessionState.FINISHED: frozenset(),
    SessionState.ABORTED: frozenset(),
}


@dataclass(eq=False)
class Session:
    """
    A game session.

    Contains:
    - The descriptor it was created from (kept even if the game is removed)
    - The participating players, in the order they joined
    - The configuration it runs with, fixed once it became active
    - The concrete game instance, once active
    """
    descriptor: GameDescriptor
    challenge: bool = False
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: float = field(default_factory=time.time)

    _state: SessionState = field(default=SessionState.SIGNUP, init=False)
    _players: list[Hashable] = field(default_factory=list, init=False)
    _ready: set[Hashable] = field(default_factory=set, init=False)
    _configuration: Mapping[str, Any] | None = field(default=None, init=False)
    _game: Game | None = field(default=None, init=False, repr=False)
    _winner: Hashable | None = field(default=None, init=False)
    _initiator: Hashable | None = field(default=None, init=False)
    _starting: bool = field(default=False, init=False)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def players(self) -> tuple[Hashable, ...]:
        return tuple(self._players)

    @property
    def player_count(self) -> int:
        return len(self._players)

    @property
    def ready_players(self) -> frozenset[Hashable]:
        return frozenset(self._ready)

    @property
    def configuration(self) -> Mapping[str, Any] | None:
        """Resolved settings, available once the session is active."""
        return self._configuration

    @property
    def game(self) -> Game | None:
        return self._game

    @property
    def winner(self) -> Hashable | None:
        return self._winner

    @property
    def starting(self) -> bool:
        """Whether settings are being resolved for the transition to ACTIVE."""
        return self._starting

    @property
    def is_full(self) -> bool:
        return len(self._players) >= self.descriptor.maximum_players

    @property
    def is_open(self) -> bool:
        """Whether players can sign up through the game's command."""
        return (
            self._state == SessionState.SIGNUP
            and not self.challenge
            and not self._starting
            and not self.is_full
        )

    @property
    def is_terminal(self) -> bool:
        return self._state in (SessionState.FINISHED, SessionState.ABORTED)

    def has_player(self, player_id: Hashable) -> bool:
        return player_id in self._players

    def _transition(self, state: SessionState):
        if state not in TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, state)
        self._state = state

    def _activate(self, configuration: dict[str, Any], game: Game):
        self._transition(SessionState.ACTIVE)
        self._configuration = MappingProxyType(dict(configuration))
        self._game = game
