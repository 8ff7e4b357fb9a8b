"""
Setting - Typed declaration of one configurable option of a game.

Settings are identified as `category/name`. The type decides how the value is
validated, summarised for dialogs and edited during customization:
- NUMBER: an int or float
- BOOLEAN: True or False
- ENUM: one of the declared `options`
- CUSTOM: a composite value handled by a GameCustomSetting
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, TYPE_CHECKING
import math

from ..errors import ConfigurationDataError
from ..messages import Message

if TYPE_CHECKING:
    from ..customization.custom_setting import GameCustomSetting


class SettingType(Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Setting:
    """Declaration of a configurable option: where it lives, its type and default."""
    category: str
    name: str
    type: SettingType
    default: Any
    description: str
    options: tuple = ()
    handler: GameCustomSetting | None = None

    @property
    def identifier(self) -> str:
        return f"{self.category}/{self.name}"

    def validate_value(self, value: Any) -> Any:
        """Return `value` if it is valid for this setting, raise ConfigurationDataError otherwise."""
        if self.type == SettingType.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationDataError(
                    f"{self.identifier}: expected a number, got {value!r}"
                )
            if not math.isfinite(value):
                raise ConfigurationDataError(
                    f"{self.identifier}: expected a finite number, got {value!r}"
                )
        elif self.type == SettingType.BOOLEAN:
            if not isinstance(value, bool):
                raise ConfigurationDataError(
                    f"{self.identifier}: expected a boolean, got {value!r}"
                )
        elif self.type == SettingType.ENUM:
            if value not in self.options:
                raise ConfigurationDataError(
                    f"{self.identifier}: {value!r} is not one of {list(self.options)}"
                )
        elif self.type == SettingType.CUSTOM:
            if self.handler is None:
                raise ConfigurationDataError(f"{self.identifier}: no handler for custom setting")
            self.handler.validate(value)
        return value

    def summarize(self, value: Any) -> str:
        """Human readable rendition of `value` for customization dialogs."""
        if self.type == SettingType.BOOLEAN:
            return Message.GAME_CUSTOMIZE_ENABLED if value else Message.GAME_CUSTOMIZE_DISABLED
        if self.type == SettingType.CUSTOM:
            if self.handler is None:
                raise ConfigurationDataError(f"{self.identifier}: no handler for custom setting")
            return self.handler.get_customization_dialog_value(value)
        return str(value)
