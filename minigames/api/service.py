"""
API Service - Business logic layer between the HTTP API and the games core.

The service:
1. Lists registered games (the catalogue)
2. Connects players and relays their commands
3. Delivers dialog responses and cancellations
4. Formats sessions for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Hashable

from .. import __version__
from ..games import Games
from ..session import Session
from .schemas import (
    # Requests
    CommandRequest,
    ConnectPlayerRequest,
    DialogResponseRequest,
    # Responses
    CancelResponse,
    CommandResponse,
    DialogResponse,
    ErrorResponse,
    GameListResponse,
    HealthResponse,
    PlayerResponse,
    SessionListResponse,
    # Shared
    GameInfo,
    SessionInfo,
    SettingInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)


@dataclass
class GamesService:
    """
    Main API service.

    Usage:
        service = GamesService()
        service.games.register_game(RaceGame, {...})

        service.connect_player(ConnectPlayerRequest(player_id=1, name="Gunther"))
        response = await service.invoke_command("race", CommandRequest(player_id=1))
    """
    games: Games = field(default_factory=Games)

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="minigames",
            version=__version__,
            games=len(self.games.registry),
            sessions=len(self.games.sessions.list_sessions()),
        )

    def list_games(self) -> GameListResponse:
        games = [
            GameInfo(
                number=number,
                name=descriptor.name,
                command=descriptor.command,
                goal=descriptor.goal,
                minimum_players=descriptor.minimum_players,
                maximum_players=descriptor.maximum_players,
                price=descriptor.price,
                settings=[
                    SettingInfo(
                        identifier=setting.identifier,
                        type=setting.type.value,
                        description=setting.description,
                        default=setting.default,
                        summary=setting.summarize(setting.default),
                        options=list(setting.options),
                    )
                    for setting in descriptor.settings
                ],
            )
            for number, descriptor in enumerate(self.games.registry.games, start=1)
        ]
        return GameListResponse(games=games, count=len(games))

    # =========================================================================
    # Players
    # =========================================================================

    def connect_player(self, request: ConnectPlayerRequest) -> PlayerResponse | ErrorResponse:
        if self.games.players.get_by_id(request.player_id) is not None:
            return ErrorResponse(
                error=f"Player {request.player_id} is already connected",
                error_code=ErrorCode.PLAYER_EXISTS,
            )
        player = self.games.players.connect(request.player_id, request.name)
        return PlayerResponse(player_id=player.id, name=player.name)

    async def disconnect_player(self, player_id: Hashable) -> bool:
        if self.games.players.get_by_id(player_id) is None:
            return False
        self.games.customization.cancel(player_id)
        await self.games.sessions.leave_all(player_id)
        self.games.players.disconnect(player_id)
        return True

    def get_player(self, player_id: Hashable) -> PlayerResponse | ErrorResponse:
        player = self.games.players.get_by_id(player_id)
        if player is None:
            return self._player_not_found(player_id)
        return PlayerResponse(player_id=player.id, name=player.name, messages=list(player.messages))

    # =========================================================================
    # Commands and dialogs
    # =========================================================================

    async def invoke_command(self, command: str, request: CommandRequest) -> CommandResponse | ErrorResponse:
        player = self.games.players.get_by_id(request.player_id)
        if player is None:
            return self._player_not_found(request.player_id)

        received = len(player.messages)
        result = await self.games.commands.dispatch(command, request.player_id, request.arguments)

        return CommandResponse(
            command=command,
            handled=result.handled,
            message=result.message,
            session=self._session_to_info(result.session) if result.session else None,
            messages=player.messages[received:],
        )

    def respond_to_dialog(self, player_id: Hashable, request: DialogResponseRequest) -> DialogResponse | ErrorResponse:
        if self.games.players.get_by_id(player_id) is None:
            return self._player_not_found(player_id)
        delivered = self.games.dialogs.respond_to_dialog(player_id, request.response)
        return DialogResponse(player_id=player_id, delivered=delivered)

    def cancel(self, player_id: Hashable) -> CancelResponse | ErrorResponse:
        if self.games.players.get_by_id(player_id) is None:
            return self._player_not_found(player_id)
        return CancelResponse(player_id=player_id, cancelled=self.games.customization.cancel(player_id))

    # =========================================================================
    # Sessions
    # =========================================================================

    def list_sessions(self) -> SessionListResponse:
        sessions = [self._session_to_info(s) for s in self.games.sessions.list_sessions()]
        return SessionListResponse(sessions=sessions, count=len(sessions))

    def get_session(self, session_id: str) -> SessionInfo | ErrorResponse:
        session = self.games.sessions.get_session(session_id)
        if session is None:
            return ErrorResponse(
                error="Session not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._session_to_info(session)

    def _session_to_info(self, session: Session) -> SessionInfo:
        descriptor = session.descriptor
        return SessionInfo(
            session_id=session.session_id,
            game_name=descriptor.name,
            status=SessionStatus(session.state.value),
            players=list(session.players),
            minimum_players=descriptor.minimum_players,
            maximum_players=descriptor.maximum_players,
            challenge=session.challenge,
            starting=session.starting,
            configuration=dict(session.configuration) if session.configuration is not None else None,
            winner=session.winner,
            created_at=session.created_at,
        )

    def _player_not_found(self, player_id: Hashable) -> ErrorResponse:
        return ErrorResponse(
            error=f"No player with ID {player_id} is connected",
            error_code=ErrorCode.PLAYER_NOT_FOUND,
        )
