"""
FastAPI Application - REST API for remote clients of the games server.

Endpoints:
    GET    /api/v1/health                       Health check
    GET    /api/v1/games                        List registered games
    POST   /api/v1/players                      Connect a player
    DELETE /api/v1/players/{id}                 Disconnect a player
    GET    /api/v1/players/{id}                 Get a player and their messages
    POST   /api/v1/commands/{command}           Invoke a command as a player
    POST   /api/v1/players/{id}/dialog          Answer the player's dialog
    POST   /api/v1/players/{id}/cancel          Cancel the player's customization
    GET    /api/v1/sessions                     List sessions
    GET    /api/v1/sessions/{id}                Get a session

Commands are dispatched exactly as if the player had typed them, so
`POST /api/v1/commands/race {"player_id": 1, "arguments": ["start"]}` is
`/race start`. Messages the player received while the command was handled are
included in the response.

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Union
import logging

from ..config import ALLOWED_ORIGINS

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GamesService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi"
        )

    from .. import __version__
    from .service import GamesService
    from .schemas import (
        # Request models
        CommandRequest,
        ConnectPlayerRequest,
        DialogResponseRequest,
        # Response models
        CancelResponse,
        CommandResponse,
        DialogResponse,
        ErrorResponse,
        GameListResponse,
        HealthResponse,
        PlayerResponse,
        SessionInfo,
        SessionListResponse,
        # Enums
        ErrorCode,
    )

    api_service = service or GamesService()

    @asynccontextmanager
    async def lifespan(app):
        yield
        logger.info("Disposing games")
        api_service.games.dispose()

    app = FastAPI(
        title="Minigames API",
        description="""
Minigame orchestration - sign up, customize and play minigames remotely.

## Error Codes

| Code | Description |
|------|-------------|
| `PLAYER_NOT_FOUND` | No connected player with the given ID |
| `PLAYER_EXISTS` | A player with the given ID is already connected |
| `SESSION_NOT_FOUND` | Session does not exist or has been released |
| `COMMAND_NOT_FOUND` | No game is bound to the command |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.PLAYER_NOT_FOUND: 404,
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.COMMAND_NOT_FOUND: 404,
        ErrorCode.PLAYER_EXISTS: 409,
    }

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def from_error(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_codes.get(response.error_code, 400),
            details=response.details,
        )

    # =========================================================================
    # Health & Catalogue
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return api_service.health()

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List registered games",
    )
    async def list_games() -> GameListResponse:
        """List the registered games in catalogue order."""
        return api_service.list_games()

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/players",
        response_model=PlayerResponse,
        responses={409: {"model": ErrorResponse, "description": "Player already connected"}},
        tags=["Players"],
        summary="Connect a player",
    )
    async def connect_player(request: ConnectPlayerRequest) -> Union[PlayerResponse, JSONResponse]:
        response = api_service.connect_player(request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/players/{player_id}",
        response_model=PlayerResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Get a player and the messages they received",
    )
    async def get_player(player_id: str) -> Union[PlayerResponse, JSONResponse]:
        response = api_service.get_player(_player_key(player_id))
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/players/{player_id}",
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Disconnect a player",
    )
    async def disconnect_player(player_id: str):
        """Disconnect a player, removing them from every game they take part in."""
        key = _player_key(player_id)
        if not await api_service.disconnect_player(key):
            return make_error_response(
                ErrorCode.PLAYER_NOT_FOUND,
                f"No player with ID {player_id} is connected",
                status_code=404,
            )
        return {"success": True, "player_id": key}

    @app.post(
        "/api/v1/players/{player_id}/dialog",
        response_model=DialogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Answer the player's dialog",
    )
    async def respond_to_dialog(
        player_id: str,
        request: DialogResponseRequest,
    ) -> Union[DialogResponse, JSONResponse]:
        """
        Deliver a response to the dialog the player currently has open.

        When no dialog is open, `delivered` is false. The response is queued
        for the next dialog while the player is customizing a game, and
        dropped otherwise.
        """
        response = api_service.respond_to_dialog(_player_key(player_id), request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/players/{player_id}/cancel",
        response_model=CancelResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Cancel the player's customization",
    )
    async def cancel(player_id: str) -> Union[CancelResponse, JSONResponse]:
        response = api_service.cancel(_player_key(player_id))
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    # =========================================================================
    # Command Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/commands/{command}",
        response_model=CommandResponse,
        responses={404: {"model": ErrorResponse, "description": "Unknown player or command"}},
        tags=["Commands"],
        summary="Invoke a command as a player",
    )
    async def invoke_command(command: str, request: CommandRequest) -> Union[CommandResponse, JSONResponse]:
        response = await api_service.invoke_command(command, request)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        if not response.handled:
            return make_error_response(
                ErrorCode.COMMAND_NOT_FOUND,
                response.message or f"Unknown command: /{command}",
                status_code=404,
            )
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        return api_service.list_sessions()

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get a session",
    )
    async def get_session(session_id: str) -> Union[SessionInfo, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    return app


def _player_key(player_id: str) -> Union[int, str]:
    """Player IDs arrive as path segments; numeric ones are integers."""
    try:
        return int(player_id)
    except ValueError:
        return player_id


# For running directly: uvicorn minigames.api.app:app
app = create_app()
