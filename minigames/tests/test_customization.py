"""
Tests for settings customization.

Tests:
- Default resolution
- Interactive flows for each setting type
- Cancellation, dismissal and timeouts
- Environment settings summaries
"""

import asyncio
import pytest

from ..collaborators import DialogService, ObjectManager, Player
from ..config import Settings
from ..customization import CustomizationEngine, EnvironmentSettings, FlowState
from ..description import GameDescriptor, Setting, SettingType
from ..errors import ConfigurationDataError
from ..messages import Message
from ..session import SessionState
from .conftest import RecordingGame, TrackSelection, answer_dialogs, wait_for_dialog


LAPS = Setting("race", "laps", SettingType.NUMBER, 3, "Laps")
NITRO = Setting("race", "nitro", SettingType.BOOLEAN, True, "Nitro")
VEHICLE = Setting("race", "vehicle", SettingType.ENUM, "Infernus", "Vehicle", options=("Infernus", "Bullet"))
ENVIRONMENT = Setting(
    "race", "environment", SettingType.CUSTOM, EnvironmentSettings.DEFAULT,
    "Environment", handler=EnvironmentSettings(),
)
TRACK = Setting("race", "track", SettingType.CUSTOM, "Airport", "Track", handler=TrackSelection())


@pytest.fixture
def dialogs():
    return DialogService()


@pytest.fixture
def objects():
    return ObjectManager()


@pytest.fixture
def engine(dialogs, objects):
    return CustomizationEngine(dialogs, objects)


@pytest.fixture
def player():
    return Player(id=0, name="Gunther")


@pytest.fixture
def race(race_options):
    return GameDescriptor.create(
        RecordingGame, race_options(settings=[LAPS, NITRO, VEHICLE, ENVIRONMENT])
    )


async def resolve_answering(engine, descriptor, player, dialogs, *responses):
    """Resolve interactively, answering each dialog as it opens."""
    resolving = asyncio.ensure_future(engine.resolve(descriptor, player, interactive=True))
    await answer_dialogs(dialogs, player.id, *responses)
    return await resolving


class TestDefaults:
    """Tests for resolving default configurations."""

    def test_defaults(self, engine, race):
        result = asyncio.run(engine.resolve(race))

        assert not result.cancelled
        assert result.configuration == {
            "race/laps": 3,
            "race/nitro": True,
            "race/vehicle": "Infernus",
            "race/environment": {"time": "Afternoon", "weather": "Sunny", "gravity": "Normal"},
        }

    def test_defaults_are_copies(self, engine, race):
        configuration = engine.defaults(race)
        configuration["race/environment"]["weather"] = "Foggy"

        assert EnvironmentSettings.DEFAULT["weather"] == "Sunny"
        assert engine.defaults(race)["race/environment"]["weather"] == "Sunny"

    def test_non_interactive_ignores_player(self, engine, race, player, dialogs):
        result = asyncio.run(engine.resolve(race, player, interactive=False))

        assert result.configuration["race/laps"] == 3
        assert player.id not in dialogs.last_dialog

    def test_invalid_default_raises(self, engine):
        # Constructed directly, bypassing the validation done on registration.
        descriptor = GameDescriptor(
            identity="broken",
            game_class=RecordingGame,
            name="Broken",
            settings=(Setting("race", "laps", SettingType.NUMBER, "three", "Laps"),),
        )
        with pytest.raises(ConfigurationDataError):
            asyncio.run(engine.resolve(descriptor))


class TestInteractiveFlow:
    """Tests for customizing settings through dialogs."""

    def test_start_immediately(self, engine, race, player, dialogs):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 0))

        assert not result.cancelled
        assert result.configuration["race/laps"] == 3
        assert dialogs.last_dialog[0].items == (
            Message.GAME_CUSTOMIZE_START,
            "Laps: 3",
            "Nitro: Enabled",
            "Vehicle: Infernus",
            "Environment: Sunny afternoon",
        )
        assert engine.get_flow(0) is None

    def test_change_number(self, engine, race, player, dialogs):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 1, "5", 0))
        assert result.configuration["race/laps"] == 5

    def test_invalid_number_rejected(self, engine, race, player, dialogs):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 1, "fast", 0))

        assert result.configuration["race/laps"] == 3
        assert player.messages == [Message.format(Message.GAME_CUSTOMIZE_INVALID_NUMBER, "fast")]

    @pytest.mark.parametrize("answer", ["nan", "inf", "-Infinity"])
    def test_non_finite_number_rejected(self, engine, race, player, dialogs, answer):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 1, answer, 0))

        assert result.configuration["race/laps"] == 3
        assert player.messages == [Message.format(Message.GAME_CUSTOMIZE_INVALID_NUMBER, answer)]

    def test_change_boolean_and_enum(self, engine, race, player, dialogs):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 2, 1, 3, 1, 0))

        assert result.configuration["race/nitro"] is False
        assert result.configuration["race/vehicle"] == "Bullet"

    def test_change_environment(self, engine, race, player, dialogs):
        # Environment, Weather, Heatwave, Time, Night, Done, Start the game
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 4, 2, 2, 1, 3, 0, 0))

        environment = result.configuration["race/environment"]
        assert environment == {"time": "Night", "weather": "Heatwave", "gravity": "Normal"}
        assert ENVIRONMENT.summarize(environment) == "Nightly heatwave"

    def test_dismissing_cancels(self, engine, race, player, dialogs):
        result = asyncio.run(resolve_answering(engine, race, player, dialogs, 1, None))

        assert result.cancelled
        assert engine.get_flow(0) is None

    def test_cancel_releases_markers(self, engine, race_options, player, dialogs, objects):
        descriptor = GameDescriptor.create(RecordingGame, race_options(settings=[TRACK]))

        async def scenario():
            resolving = asyncio.ensure_future(engine.resolve(descriptor, player, interactive=True))
            await answer_dialogs(dialogs, 0, 1)

            await wait_for_dialog(dialogs, 0)
            assert objects.count == 1
            assert engine.get_flow(0).state == FlowState.SELECTING

            assert engine.cancel(0)
            return await resolving

        result = asyncio.run(scenario())

        assert result.cancelled
        assert objects.count == 0
        assert not engine.cancel(0)

    def test_exception_releases_markers(self, engine, race_options, player, dialogs, objects):
        descriptor = GameDescriptor.create(RecordingGame, race_options(settings=[TRACK]))

        # Index 7 is not a track; the handler fails with an IndexError.
        with pytest.raises(IndexError):
            asyncio.run(resolve_answering(engine, descriptor, player, dialogs, 1, 7))

        assert objects.count == 0
        assert engine.get_flow(0) is None

    def test_timeout_cancels(self, dialogs, objects, race, player):
        engine = CustomizationEngine(
            dialogs, objects, Settings({"games/customization_timeout_sec": 0.01})
        )
        result = asyncio.run(engine.resolve(race, player, interactive=True))
        assert result.cancelled

    def test_new_flow_cancels_previous(self, engine, player):
        async def scenario():
            first = engine.begin(player)
            second = engine.begin(player)
            return first, second

        first, second = asyncio.run(scenario())

        assert first.is_cancelled
        assert engine.get_flow(0) is second
        assert second.state == FlowState.PENDING


class TestCustomizationThroughSessions:
    """Tests for customization as part of starting a session."""

    def test_cancel_returns_session_to_signup(self, games, race_options):
        games.register_game(RecordingGame, race_options(settings=[TRACK]))

        async def scenario():
            await games.commands.dispatch("race", 0)
            result = await games.commands.dispatch("race", 0, ["custom"])
            session = result.session

            await answer_dialogs(games.dialogs, 0, 1)
            await wait_for_dialog(games.dialogs, 0)
            assert games.objects.count == 1

            await games.commands.dispatch("race", 0, ["cancel"])
            await games.sessions.wait_until_idle()
            return session

        session = asyncio.run(scenario())

        assert session.state == SessionState.SIGNUP
        assert not session.starting
        assert games.objects.count == 0
        assert Message.format(Message.GAME_CUSTOMIZATION_CANCELLED, "Race") in games.players.get_by_id(0).messages

    def test_customized_configuration_reaches_game(self, games, race_options):
        games.register_game(RecordingGame, race_options(settings=[LAPS]))

        async def scenario():
            await games.commands.dispatch("race", 0)
            result = await games.commands.dispatch("race", 0, ["custom"])
            await answer_dialogs(games.dialogs, 0, 1, "10", 0)
            await games.sessions.wait_until_idle()
            return result.session

        session = asyncio.run(scenario())

        assert session.state == SessionState.ACTIVE
        assert session.game.settings["race/laps"] == 10

    def test_late_response_does_not_reach_next_customization(self, games, race_options):
        games.register_game(RecordingGame, race_options(settings=[LAPS]))

        async def scenario():
            await games.commands.dispatch("race", 0)
            result = await games.commands.dispatch("race", 0, ["custom"])
            await wait_for_dialog(games.dialogs, 0)
            await games.commands.dispatch("race", 0, ["cancel"])
            await games.sessions.wait_until_idle()

            assert not games.dialogs.respond_to_dialog(0, 0)

            await games.commands.dispatch("race", 0, ["custom"])
            await wait_for_dialog(games.dialogs, 0)
            state, starting = result.session.state, result.session.starting

            games.customization.cancel(0)
            await games.sessions.wait_until_idle()
            return state, starting

        state, starting = asyncio.run(scenario())

        assert state == SessionState.SIGNUP
        assert starting

    def test_invalid_configuration_keeps_signup(self, games):
        descriptor = GameDescriptor(
            identity="broken",
            game_class=RecordingGame,
            name="Broken",
            settings=(Setting("race", "laps", SettingType.NUMBER, "three", "Laps"),),
        )
        games.registry.register_game(descriptor)

        async def scenario():
            session = games.sessions.create_session(descriptor, 0)
            return session, await games.sessions.start(session, initiator_id=0)

        session, started = asyncio.run(scenario())

        assert not started
        assert session.state == SessionState.SIGNUP
        assert games.players.get_by_id(0).messages[-1].startswith("Broken cannot be started:")


class TestDialogService:
    """Tests for delivering dialog responses."""

    def test_response_delivered_to_open_dialog(self, dialogs, player):
        async def scenario():
            prompting = asyncio.ensure_future(dialogs.prompt(player, "Race", items=["Start"]))
            await wait_for_dialog(dialogs, 0)
            assert dialogs.respond_to_dialog(0, 0)
            return await prompting

        assert asyncio.run(scenario()) == 0
        assert not dialogs.has_open_dialog(0)

    def test_response_queued_while_accepting(self, dialogs, player):
        dialogs.accept_responses(0)
        assert not dialogs.respond_to_dialog(0, 2)
        assert asyncio.run(dialogs.prompt(player, "Race", items=["Start"])) == 2

    def test_response_without_flow_is_dropped(self, dialogs, player):
        async def scenario():
            assert not dialogs.respond_to_dialog(0, 1)
            prompting = asyncio.ensure_future(dialogs.prompt(player, "Race", items=["Start"]))
            await wait_for_dialog(dialogs, 0)
            dialogs.respond_to_dialog(0, 0)
            return await prompting

        assert asyncio.run(scenario()) == 0

    def test_discard_drops_queued_responses(self, dialogs, player):
        async def scenario():
            dialogs.accept_responses(0)
            dialogs.respond_to_dialog(0, 1)
            dialogs.discard(0)
            assert not dialogs.respond_to_dialog(0, 1)

            prompting = asyncio.ensure_future(dialogs.prompt(player, "Race", items=["Start"]))
            await wait_for_dialog(dialogs, 0)
            dialogs.respond_to_dialog(0, 0)
            return await prompting

        assert asyncio.run(scenario()) == 0

    def test_flow_end_discards_responses(self, engine, race, player, dialogs):
        asyncio.run(resolve_answering(engine, race, player, dialogs, None))

        assert not dialogs.respond_to_dialog(0, 0)
        assert 0 not in dialogs._queued


class TestEnvironmentSettings:
    """Tests for the environment summary rules."""

    @pytest.fixture
    def environment(self):
        return EnvironmentSettings()

    @pytest.mark.parametrize("value,summary", [
        ({"time": "Afternoon", "weather": "Sunny", "gravity": "Normal"}, "Sunny afternoon"),
        ({"time": "Evening", "weather": "Rainy", "gravity": "High"}, "Rainy evening, high gravity"),
        ({"time": "Morning", "weather": "Sandstorm", "gravity": "Low"}, "Morning sandstorm, low gravity"),
        ({"time": "Night", "weather": "Heatwave", "gravity": "Normal"}, "Nightly heatwave"),
        ({"time": "Night", "weather": "Foggy", "gravity": "Normal"}, "Foggy night"),
    ])
    def test_summary(self, environment, value, summary):
        assert environment.get_customization_dialog_value(value) == summary

    @pytest.mark.parametrize("value", [
        {"time": "Noon", "weather": "Sunny", "gravity": "Normal"},
        {"time": "Night", "weather": "Snowy", "gravity": "Normal"},
        {"time": "Night", "weather": "Sunny", "gravity": "Zero"},
        "Sunny afternoon",
    ])
    def test_invalid_values(self, environment, value):
        with pytest.raises(ConfigurationDataError):
            environment.get_customization_dialog_value(value)
        with pytest.raises(ConfigurationDataError):
            environment.validate(value)
