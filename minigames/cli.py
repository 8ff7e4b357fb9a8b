"""
Minigames CLI - Command-line tools for game authors and operators.

Usage:
    minigames validate <options_file>   Validate the options of a game description
    minigames settings                  Print the tunable settings and their values
"""

import argparse
import json
import logging
import sys

from .config import MINIGAMES_LOG_LEVEL


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Minigames - Orchestration core for server minigames",
        prog="minigames",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a game description")
    validate_parser.add_argument("options_file", help="Path to a JSON file with the game's options")

    # Settings command
    subparsers.add_parser("settings", help="Print the tunable settings")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, MINIGAMES_LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        cmd_validate(args)
    elif args.command == "settings":
        cmd_settings(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_validate(args):
    """Validate a game description stored as JSON."""
    from .description import validate_options
    from .errors import ConfigurationDataError
    from .session import Game

    try:
        with open(args.options_file, "r", encoding="utf-8") as f:
            options = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.options_file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        sys.exit(1)

    if not isinstance(options, dict):
        print("Error: Expected a JSON object with the game's options")
        sys.exit(1)

    print(f"Validating: {args.options_file}")
    try:
        options = load_options(options)
    except ConfigurationDataError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = validate_options(Game, options)

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        sys.exit(1)

    print(f"\n{options['name']} is valid.")


def load_options(options: dict) -> dict:
    """
    Turn the settings of JSON options into Setting declarations.

    Each setting is an object with `category`, `name`, `type` (number, boolean
    or enum), `default`, `description` and, for enums, `options`. Custom
    settings need a handler and cannot be described in JSON.
    """
    from .description import Setting, SettingType
    from .errors import ConfigurationDataError

    settings = []
    for entry in options.get("settings", ()) or ():
        if not isinstance(entry, dict):
            raise ConfigurationDataError(f"Setting must be an object, got {entry!r}")
        try:
            setting_type = SettingType(str(entry.get("type", "")).lower())
        except ValueError:
            raise ConfigurationDataError(f"Unknown setting type: {entry.get('type')!r}")
        if setting_type == SettingType.CUSTOM:
            raise ConfigurationDataError("Custom settings cannot be described in JSON")

        settings.append(Setting(
            category=entry.get("category", ""),
            name=entry.get("name", ""),
            type=setting_type,
            default=entry.get("default"),
            description=entry.get("description", ""),
            options=tuple(entry.get("options", ())),
        ))

    loaded = dict(options)
    if "settings" in options:
        loaded["settings"] = settings
    return loaded


def cmd_settings(args):
    """Print the tunable settings."""
    from .config import Settings, MINIGAMES_ENV

    print(f"Environment: {MINIGAMES_ENV}")
    for key, value in Settings().items():
        print(f"  {key} = {value!r}")


if __name__ == "__main__":
    main()
