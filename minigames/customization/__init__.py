"""
Customization Module - Turns a game's declared settings into the fixed
configuration a session runs with, optionally asking the player first.
"""

from .custom_setting import GameCustomSetting
from .engine import CustomizationEngine, CustomizationResult
from .environment import EnvironmentSettings
from .flow import CustomizationFlow, FlowState

__all__ = [
    "GameCustomSetting",
    "CustomizationEngine",
    "CustomizationResult",
    "EnvironmentSettings",
    "CustomizationFlow",
    "FlowState",
]
