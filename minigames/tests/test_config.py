"""
Tests for configuration and the command-line interface.
"""

import json
import pytest

from ..cli import load_options, main
from ..config import DEFAULT_SETTINGS, Settings
from ..description import Setting, SettingType
from ..errors import ConfigurationDataError


class TestSettings:
    """Tests for the tunable settings."""

    def test_defaults(self):
        settings = Settings()
        for key, value in DEFAULT_SETTINGS.items():
            assert settings.get_value(key) == value

    def test_overrides(self):
        settings = Settings({"games/signup_timeout_sec": 5})
        assert settings.get_value("games/signup_timeout_sec") == 5

    def test_unknown_setting(self):
        settings = Settings()
        with pytest.raises(KeyError):
            settings.get_value("games/unknown")
        with pytest.raises(KeyError):
            settings.set_value("games/unknown", 1)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MINIGAMES_GAMES_SIGNUP_TIMEOUT_SEC", "45")
        monkeypatch.setenv("MINIGAMES_GAMES_ANNOUNCE_RESULTS", "false")

        settings = Settings()

        assert settings.get_value("games/signup_timeout_sec") == 45
        assert settings.get_value("games/announce_results") is False

    def test_items_sorted(self):
        keys = [key for key, _ in Settings().items()]
        assert keys == sorted(keys)


class TestCLI:
    """Tests for the minigames command."""

    def test_load_options(self):
        options = load_options({
            "name": "Race",
            "settings": [
                {"category": "race", "name": "laps", "type": "number", "default": 3, "description": "Laps"},
                {
                    "category": "race", "name": "vehicle", "type": "ENUM", "default": "Bullet",
                    "description": "Vehicle", "options": ["Bullet", "Infernus"],
                },
            ],
        })

        assert options["settings"] == [
            Setting("race", "laps", SettingType.NUMBER, 3, "Laps"),
            Setting("race", "vehicle", SettingType.ENUM, "Bullet", "Vehicle", options=("Bullet", "Infernus")),
        ]

    def test_load_options_rejects_custom(self):
        with pytest.raises(ConfigurationDataError):
            load_options({"name": "Race", "settings": [{"type": "custom"}]})

    def test_validate_valid_file(self, tmp_path, capsys):
        path = tmp_path / "race.json"
        path.write_text(json.dumps({"name": "Race", "goal": "Win.", "command": "race"}))

        main(["validate", str(path)])

        assert "Race is valid." in capsys.readouterr().out

    def test_validate_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "race.json"
        path.write_text(json.dumps({"name": "Race", "minimum_players": 0}))

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", str(path)])

        assert exc_info.value.code == 1
        assert "minimum_players must be an integer >= 1" in capsys.readouterr().out

    def test_settings_command(self, capsys):
        main(["settings"])
        assert "games/signup_timeout_sec" in capsys.readouterr().out
