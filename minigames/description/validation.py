"""
Description Validation - Checks the options a feature registers a game with.

Validates that:
1. Required options are present (name)
2. Values have the right shape (command token, player counts, price)
3. Settings are well-formed and uniquely named
4. Invariants hold (e.g., minimum_players <= maximum_players)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import re

from ..errors import ConfigurationDataError
from .setting import Setting, SettingType

KNOWN_OPTIONS = {
    "name",
    "goal",
    "command",
    "minimum_players",
    "maximum_players",
    "price",
    "settings",
}

COMMAND_PATTERN = re.compile(r"^[a-z0-9]+$")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_options(game_class: Any, options: dict[str, Any]) -> ValidationResult:
    """
    Validate the options describing a game.

    Returns ValidationResult with errors and warnings.
    """
    from ..session.game import Game

    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(game_class, type) or not issubclass(game_class, Game):
        errors.append(f"{game_class!r} must be a subclass of Game")

    for key in sorted(set(options) - KNOWN_OPTIONS):
        errors.append(f"Unknown option '{key}'")

    # Basic field validation
    name = options.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("name is required")

    goal = options.get("goal")
    if goal is not None and not isinstance(goal, str):
        errors.append("goal must be a string")

    command = options.get("command")
    if command is not None:
        if not isinstance(command, str) or not COMMAND_PATTERN.match(command):
            errors.append(f"command must be a lowercase word, got {command!r}")

    minimum = options.get("minimum_players", 1)
    maximum = options.get("maximum_players", 4)
    if not _is_integer(minimum) or minimum < 1:
        errors.append("minimum_players must be an integer >= 1")
    elif not _is_integer(maximum) or maximum < minimum:
        errors.append("maximum_players must be an integer >= minimum_players")

    price = options.get("price", 0)
    if not _is_integer(price) or price < 0:
        errors.append("price must be a non-negative integer")

    # Validate settings
    identifiers: set[str] = set()
    for setting in options.get("settings", ()) or ():
        if not isinstance(setting, Setting):
            errors.append(f"{setting!r} is not a Setting")
            continue
        if setting.identifier in identifiers:
            errors.append(f"Duplicate setting '{setting.identifier}'")
        identifiers.add(setting.identifier)
        errors.extend(_validate_setting(setting))

    # Warnings for incomplete descriptions
    if not goal:
        warnings.append("No goal defined")
    if command is None:
        warnings.append("No command defined - game is only reachable through the catalogue")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_setting(setting: Setting) -> list[str]:
    """Validate a single setting declaration."""
    errors = []
    if not setting.category or not setting.name:
        errors.append(f"Setting '{setting.identifier}' needs a category and a name")
    if not setting.description:
        errors.append(f"Setting '{setting.identifier}' has no description")

    if setting.type == SettingType.ENUM and not setting.options:
        errors.append(f"Setting '{setting.identifier}' is an enum without options")
    if setting.type == SettingType.CUSTOM and setting.handler is None:
        errors.append(f"Setting '{setting.identifier}' is custom but has no handler")

    if not errors:
        try:
            setting.validate_value(setting.default)
        except ConfigurationDataError as e:
            errors.append(f"Invalid default for {e}")

    return errors


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
