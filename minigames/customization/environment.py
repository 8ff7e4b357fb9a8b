"""
Environment Settings - The time, weather and gravity a game is played in.

Values are dictionaries with the keys `time`, `weather` and `gravity`:

    {"time": "Afternoon", "weather": "Sunny", "gravity": "Normal"}
"""

from __future__ import annotations
from typing import Any

from ..errors import ConfigurationDataError
from ..messages import Message
from .custom_setting import GameCustomSetting


class EnvironmentSettings(GameCustomSetting):
    # Options available for each of the configuration values.
    TIME_OPTIONS = ("Morning", "Afternoon", "Evening", "Night")
    WEATHER_OPTIONS = ("Cloudy", "Foggy", "Heatwave", "Rainy", "Sandstorm", "Sunny")
    GRAVITY_OPTIONS = ("Low", "Normal", "High")

    COMPONENTS = (
        ("time", "Time", TIME_OPTIONS),
        ("weather", "Weather", WEATHER_OPTIONS),
        ("gravity", "Gravity", GRAVITY_OPTIONS),
    )

    DEFAULT = {"time": "Afternoon", "weather": "Sunny", "gravity": "Normal"}

    def validate(self, value: Any):
        if not isinstance(value, dict):
            raise ConfigurationDataError(f"Invalid environment value: {value!r}")
        for key, _, options in self.COMPONENTS:
            if value.get(key) not in options:
                raise ConfigurationDataError(f"Invalid {key} value: {value.get(key)!r}")

    def get_customization_dialog_value(self, value: Any) -> str:
        if not isinstance(value, dict):
            raise ConfigurationDataError(f"Invalid environment value: {value!r}")

        time = value.get("time")
        weather = value.get("weather")
        gravity = value.get("gravity")

        if time not in self.TIME_OPTIONS:
            raise ConfigurationDataError(f"Invalid time value: {time!r}")
        if gravity not in self.GRAVITY_OPTIONS:
            raise ConfigurationDataError(f"Invalid gravity value: {gravity!r}")

        if weather in ("Cloudy", "Foggy", "Rainy", "Sunny"):
            summary = f"{weather} {time.lower()}"
        elif weather in ("Heatwave", "Sandstorm"):
            if time == "Night":
                summary = f"{time}ly {weather.lower()}"
            else:
                summary = f"{time} {weather.lower()}"
        else:
            raise ConfigurationDataError(f"Invalid weather value: {weather!r}")

        if gravity != "Normal":
            summary += f", {gravity.lower()} gravity"

        return summary

    async def handle_customization(self, flow, current_value: Any) -> Any:
        value = dict(current_value)
        changed = False

        while True:
            items = [Message.GAME_CUSTOMIZE_DONE] + [
                f"{label}: {value[key]}" for key, label, _ in self.COMPONENTS
            ]
            choice = await flow.prompt("Environment", items=items)
            if choice is None:
                return None
            if choice == 0:
                return value if changed else None

            if not isinstance(choice, int) or not 1 <= choice <= len(self.COMPONENTS):
                continue

            key, label, options = self.COMPONENTS[choice - 1]
            selected = await flow.prompt(label, items=list(options))
            if selected is None:
                return None
            if isinstance(selected, int) and 0 <= selected < len(options):
                value[key] = options[selected]
                changed = True
