"""Commands Module - The player-facing command surface of registered games."""

from .router import CommandRouter, DispatchResult, CATALOGUE_COMMAND, RESERVED_COMMANDS

__all__ = [
    "CommandRouter",
    "DispatchResult",
    "CATALOGUE_COMMAND",
    "RESERVED_COMMANDS",
]
