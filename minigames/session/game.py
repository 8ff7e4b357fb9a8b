"""
Game - Base class for concrete minigame implementations.

The session manager creates one instance per session when the session
becomes active. Implementations override the hooks they need and signal the
end of the game through `player_won` or `finish`.
"""

from __future__ import annotations
from typing import Any, Hashable, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import SessionManager
    from .session import Session


class Game:

    def __init__(self, session: Session, manager: SessionManager):
        self._session = session
        self._manager = manager

    @property
    def session(self) -> Session:
        return self._session

    @property
    def players(self) -> tuple[Hashable, ...]:
        return self._session.players

    @property
    def settings(self) -> Mapping[str, Any]:
        return self._session.configuration or {}

    # ---------------------------------------------------------------------------------------------

    async def on_initialized(self, settings: Mapping[str, Any]) -> bool | None:
        """
        Called when the session becomes active. Return False when the game
        could not be set up (e.g. its data could not be loaded); the session
        then finishes without a winner.
        """
        return None

    async def on_player_added(self, player_id: Hashable):
        pass

    async def on_player_removed(self, player_id: Hashable):
        pass

    async def on_finished(self):
        pass

    # ---------------------------------------------------------------------------------------------

    async def player_won(self, player_id: Hashable) -> bool:
        """Signal that `player_id` won. Finishes the session."""
        return await self._manager.finish(self._session, winner_id=player_id)

    async def finish(self) -> bool:
        """Signal that the game ended without a winner."""
        return await self._manager.finish(self._session)
