"""
Configuration - Environment configuration and tunable game settings.

Process level configuration comes from environment variables. Tunables that
features read while running are served by `Settings.get_value`, keyed as
`category/name`, each overridable from the environment as
`MINIGAMES_<CATEGORY>_<NAME>`.
"""

from __future__ import annotations
from typing import Any
import os

# Environment configuration
MINIGAMES_ENV = os.getenv("MINIGAMES_ENV", "development")
MINIGAMES_LOG_LEVEL = os.getenv("MINIGAMES_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


DEFAULT_SETTINGS: dict[str, Any] = {
    # Seconds a signup stays open before the game starts or is cancelled. 0 disables.
    "games/signup_timeout_sec": 20,
    # Seconds a player has to answer a customization dialog.
    "games/customization_timeout_sec": 60,
    # Whether winners are announced to the whole server.
    "games/announce_results": True,
}


def _env_name(key: str) -> str:
    return "MINIGAMES_" + key.replace("/", "_").upper()


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


class Settings:
    """
    Settings provider for tunable values.

    Usage:
        settings = Settings()
        timeout = settings.get_value("games/signup_timeout_sec")
    """

    def __init__(self, overrides: dict[str, Any] | None = None):
        self._values = dict(DEFAULT_SETTINGS)
        for key, default in DEFAULT_SETTINGS.items():
            raw = os.getenv(_env_name(key))
            if raw is not None:
                self._values[key] = _coerce(raw, default)
        if overrides:
            for key, value in overrides.items():
                self.set_value(key, value)

    def get_value(self, key: str) -> Any:
        if key not in self._values:
            raise KeyError(f"Unknown setting: {key}")
        return self._values[key]

    def set_value(self, key: str, value: Any):
        if key not in DEFAULT_SETTINGS:
            raise KeyError(f"Unknown setting: {key}")
        self._values[key] = value

    def items(self) -> list[tuple[str, Any]]:
        return sorted(self._values.items())
