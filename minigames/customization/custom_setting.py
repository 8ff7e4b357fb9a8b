"""
Custom settings - Composite setting values with their own editing flow.

A CUSTOM setting delegates validation, its dialog summary and its editing
flow to a GameCustomSetting.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .flow import CustomizationFlow


class GameCustomSetting(ABC):

    def validate(self, value: Any):
        """Raise ConfigurationDataError when `value` cannot be used."""
        self.get_customization_dialog_value(value)

    @abstractmethod
    def get_customization_dialog_value(self, value: Any) -> str:
        """Returns the value to display in the generic customization dialog."""
        ...

    @abstractmethod
    async def handle_customization(self, flow: CustomizationFlow, current_value: Any) -> Any:
        """
        Let the flow's player edit `current_value`.

        Returns the new value, or None when nothing changed or the flow was
        cancelled.
        """
        ...
