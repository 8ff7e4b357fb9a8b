"""
Pytest fixtures for minigames tests.
"""

import asyncio
import pytest

from ..config import Settings
from ..customization import GameCustomSetting
from ..errors import ConfigurationDataError
from ..games import Games
from ..session import Game

PLAYER_NAMES = ["Gunther", "Russell", "Lucy", "Ricky", "Joe"]


class RecordingGame(Game):
    """Game that records the hooks invoked on it."""

    def __init__(self, session, manager):
        super().__init__(session, manager)
        self.events = []

    async def on_initialized(self, settings):
        self.events.append(("initialized", dict(settings)))

    async def on_player_added(self, player_id):
        self.events.append(("added", player_id))

    async def on_player_removed(self, player_id):
        self.events.append(("removed", player_id))

    async def on_finished(self):
        self.events.append(("finished",))


class BrokenGame(Game):
    """Game whose data cannot be loaded."""

    async def on_initialized(self, settings):
        return False


class TrackSelection(GameCustomSetting):
    """Lets the player pick a track, marking the current one in the world."""
    TRACKS = ("Airport", "Docks", "Mountain")

    def get_customization_dialog_value(self, value):
        if value not in self.TRACKS:
            raise ConfigurationDataError(f"Unknown track: {value!r}")
        return value

    async def handle_customization(self, flow, current_value):
        flow.create_marker(current_value)
        choice = await flow.prompt("Track", items=list(self.TRACKS))
        if choice is None:
            return None
        return self.TRACKS[choice]


async def wait_for_dialog(dialogs, player_id):
    """Yield to the event loop until the player has a dialog open."""
    for _ in range(100):
        if dialogs.has_open_dialog(player_id):
            return
        await asyncio.sleep(0)
    raise AssertionError(f"No dialog was opened for player {player_id}")


async def answer_dialogs(dialogs, player_id, *responses):
    """Answer the player's dialogs one by one as they open."""
    for response in responses:
        await wait_for_dialog(dialogs, player_id)
        assert dialogs.respond_to_dialog(player_id, response)


@pytest.fixture
def settings() -> Settings:
    """Settings without timers, so sessions only start when asked to."""
    return Settings({
        "games/signup_timeout_sec": 0,
        "games/customization_timeout_sec": 0,
    })


@pytest.fixture
def games(settings):
    """Games with five connected players, IDs 0 to 4."""
    games = Games(settings=settings)
    for player_id, name in enumerate(PLAYER_NAMES):
        games.players.connect(player_id, name)
    yield games
    games.dispose()


@pytest.fixture
def race_options():
    """Factory for the options of a race-like game."""
    def make(**overrides):
        options = {
            "name": "Race",
            "goal": "Complete the race track in the shortest possible time.",
            "command": "race",
            "minimum_players": 1,
            "maximum_players": 4,
        }
        options.update(overrides)
        return options
    return make
