"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between remote clients (web panels, bots,
relays) and the minigames core.

Error Codes:
- PLAYER_NOT_FOUND: No connected player with the given ID
- PLAYER_EXISTS: A player with the given ID is already connected
- SESSION_NOT_FOUND: Session does not exist or has been released
- COMMAND_NOT_FOUND: No game is bound to the command
"""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    SIGNUP = "signup"
    ACTIVE = "active"
    FINISHED = "finished"
    ABORTED = "aborted"


class ErrorCode(str, Enum):
    """Structured error codes."""
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    PLAYER_EXISTS = "PLAYER_EXISTS"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    COMMAND_NOT_FOUND = "COMMAND_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class SettingInfo(BaseModel):
    """A configurable setting of a game."""
    identifier: str = Field(description="category/name")
    type: str
    description: str
    default: Any = None
    summary: str = Field(description="Default value as shown in customization dialogs")
    options: list[Any] = Field(default_factory=list)


class GameInfo(BaseModel):
    """A registered game, as listed in the catalogue."""
    number: int = Field(description="Position in the /games catalogue")
    name: str
    command: Optional[str] = None
    goal: Optional[str] = None
    minimum_players: int
    maximum_players: int
    price: int = 0
    settings: list[SettingInfo] = Field(default_factory=list)


class SessionInfo(BaseModel):
    """A game session."""
    session_id: str
    game_name: str
    status: SessionStatus
    players: list[Union[int, str]] = Field(default_factory=list)
    minimum_players: int
    maximum_players: int
    challenge: bool = False
    starting: bool = False
    configuration: Optional[dict[str, Any]] = None
    winner: Optional[Union[int, str]] = None
    created_at: float

    model_config = {"from_attributes": True}


# =============================================================================
# Requests
# =============================================================================

class ConnectPlayerRequest(BaseModel):
    """Connect a player to the server."""
    player_id: Union[int, str]
    name: str = Field(..., min_length=1)


class CommandRequest(BaseModel):
    """Invoke a command as a player, e.g. `/race start`."""
    player_id: Union[int, str]
    arguments: list[str] = Field(default_factory=list)


class DialogResponseRequest(BaseModel):
    """Answer to the player's open (or next) dialog."""
    response: Optional[Union[int, str]] = Field(
        None, description="Item index, entered text, or null to dismiss"
    )


# =============================================================================
# Responses
# =============================================================================

class PlayerResponse(BaseModel):
    player_id: Union[int, str]
    name: str
    messages: list[str] = Field(default_factory=list)


class CommandResponse(BaseModel):
    """Result of a command invocation."""
    command: str
    handled: bool
    message: Optional[str] = None
    session: Optional[SessionInfo] = None
    messages: list[str] = Field(
        default_factory=list, description="Messages the player received while handling the command"
    )


class DialogResponse(BaseModel):
    player_id: Union[int, str]
    delivered: bool = Field(description="False when no dialog was open to receive it")


class CancelResponse(BaseModel):
    player_id: Union[int, str]
    cancelled: bool


class GameListResponse(BaseModel):
    games: list[GameInfo]
    count: int


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[SessionInfo]
    count: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    games: int = 0
    sessions: int = 0
