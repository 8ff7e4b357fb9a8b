"""Game descriptions - declarative, validated metadata for registrable games."""

from .descriptor import GameDescriptor
from .setting import Setting, SettingType
from .validation import validate_options, ValidationResult

__all__ = [
    "GameDescriptor",
    "Setting",
    "SettingType",
    "validate_options",
    "ValidationResult",
]
