"""
API Module - Remote interface to the games server.

Exposes the games core via REST API. Remote clients:
1. List the registered games
2. Connect players
3. Invoke commands on behalf of players
4. Answer dialogs and cancel customization
5. Inspect sessions
"""

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
)
from .service import GamesService
from .app import create_app

__all__ = [
    # Requests
    "CommandRequest",
    "ConnectPlayerRequest",
    "DialogResponseRequest",
    # Responses
    "CancelResponse",
    "CommandResponse",
    "DialogResponse",
    "ErrorResponse",
    "GameListResponse",
    "HealthResponse",
    "PlayerResponse",
    "SessionListResponse",
    # Shared
    "GameInfo",
    "SessionInfo",
    "SettingInfo",
    # Service
    "GamesService",
    "create_app",
]
