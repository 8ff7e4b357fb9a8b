"""
Errors - Exception taxonomy for the minigames core.

Two families matter to callers:
1. RegistrationError: raised synchronously by register/remove. These are
   programming errors in the calling feature and are expected to fail loudly.
2. PlayerFacingError: raised by session operations triggered by a player.
   The command router catches these and shows their message to the player.
"""

from __future__ import annotations

from .messages import Message


class GamesError(Exception):
    """Base class for all errors raised by the minigames core."""


# =============================================================================
# Registration
# =============================================================================

class RegistrationError(GamesError):
    """Raised when registering or removing a game fails."""


class DuplicateIdentityError(RegistrationError):
    """The identity has already been registered."""

    def __init__(self, identity):
        self.identity = identity
        super().__init__(f"Game already registered: {identity!r}")


class DuplicateCommandError(RegistrationError):
    """Another registered game already owns the command."""

    def __init__(self, command: str, owner):
        self.command = command
        self.owner = owner
        super().__init__(f"Command '/{command}' is already used by {owner!r}")


class CommandConflictError(RegistrationError):
    """The command router already has a binding for the command."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Command '/{command}' is already bound")


class NotFoundError(RegistrationError):
    """Nothing is registered under the given identity or command."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Not registered: {key!r}")


class DescriptorValidationError(RegistrationError):
    """The options given for a game do not describe a valid game."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Game description invalid with {len(errors)} error(s): " + "; ".join(errors)
        )


# =============================================================================
# Player facing
# =============================================================================

class PlayerFacingError(GamesError):
    """
    An error caused by a player's action.

    `template` is formatted with the game's name to produce the message shown
    to the player.
    """
    template = Message.GAME_UNAVAILABLE

    def __init__(self, game_name: str = ""):
        self.game_name = game_name
        super().__init__(self.describe())

    def describe(self) -> str:
        return Message.format(self.template, self.game_name)


class SessionFullError(PlayerFacingError):
    template = Message.GAME_SESSION_FULL


class AlreadyJoinedError(PlayerFacingError):
    template = Message.GAME_ALREADY_JOINED


class SessionNotJoinableError(PlayerFacingError):
    template = Message.GAME_NOT_JOINABLE


class NotParticipatingError(PlayerFacingError):
    template = Message.GAME_NOT_PARTICIPATING


class NotEnoughPlayersError(PlayerFacingError):
    template = Message.GAME_NOT_ENOUGH_PLAYERS


# =============================================================================
# Runtime
# =============================================================================

class ConfigurationDataError(GamesError):
    """Stored or submitted setting data cannot be interpreted."""


class InvalidTransitionError(GamesError):
    """A session was asked to move between states it cannot move between."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid session transition: {current.value} -> {requested.value}")
