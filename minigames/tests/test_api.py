"""
Tests for API layer.

Tests:
- API service methods
- Commands and dialogs via API
- Error handling
- Application routes
"""

import asyncio
import pytest

from ..api.app import create_app
from ..api.schemas import (
    CommandRequest,
    ConnectPlayerRequest,
    DialogResponseRequest,
    ErrorCode,
    SessionStatus,
)
from ..api.service import GamesService
from ..description import Setting, SettingType
from ..games import Games
from .conftest import RecordingGame, wait_for_dialog


class TestGamesService:
    """Tests for GamesService."""

    @pytest.fixture
    def service(self, settings, race_options):
        """Create a service with a registered race and one connected player."""
        service = GamesService(games=Games(settings=settings))
        service.games.register_game(RecordingGame, race_options(
            settings=[Setting("race", "laps", SettingType.NUMBER, 3, "Laps")],
        ))
        service.connect_player(ConnectPlayerRequest(player_id=1, name="Gunther"))
        yield service
        service.games.dispose()

    def test_health(self, service):
        response = service.health()

        assert response.status == "healthy"
        assert response.games == 1
        assert response.sessions == 0

    def test_list_games(self, service):
        response = service.list_games()

        assert response.count == 1
        game = response.games[0]
        assert game.number == 1
        assert game.name == "Race"
        assert game.command == "race"
        assert game.settings[0].identifier == "race/laps"
        assert game.settings[0].type == "number"
        assert game.settings[0].summary == "3"

    def test_connect_existing_player(self, service):
        response = service.connect_player(ConnectPlayerRequest(player_id=1, name="Gunther"))

        assert hasattr(response, "error")
        assert response.error_code == ErrorCode.PLAYER_EXISTS

    def test_invoke_command(self, service):
        response = asyncio.run(service.invoke_command("race", CommandRequest(player_id=1)))

        assert response.handled
        assert response.session.status == SessionStatus.SIGNUP
        assert response.session.players == [1]
        assert response.messages == ["You have started the signup for Race. Others can join with /race."]

    def test_invoke_command_only_returns_new_messages(self, service):
        async def scenario():
            await service.invoke_command("race", CommandRequest(player_id=1))
            return await service.invoke_command("race", CommandRequest(player_id=1, arguments=["leave"]))

        response = asyncio.run(scenario())
        assert response.messages == ["You have left Race."]

    def test_invoke_command_unknown_player(self, service):
        response = asyncio.run(service.invoke_command("race", CommandRequest(player_id=2)))
        assert response.error_code == ErrorCode.PLAYER_NOT_FOUND

    def test_invoke_unknown_command(self, service):
        response = asyncio.run(service.invoke_command("hunt", CommandRequest(player_id=1)))

        assert not response.handled
        assert response.message == "Sorry, /hunt is not available."

    def test_customize_through_dialogs(self, service):
        async def scenario():
            await service.invoke_command("race", CommandRequest(player_id=1))
            await service.invoke_command("race", CommandRequest(player_id=1, arguments=["custom"]))
            for answer in (1, "7", 0):
                await wait_for_dialog(service.games.dialogs, 1)
                delivered = service.respond_to_dialog(1, DialogResponseRequest(response=answer))
                assert delivered.delivered
            await service.games.sessions.wait_until_idle()
            return service.list_sessions()

        response = asyncio.run(scenario())

        assert response.count == 1
        session = response.sessions[0]
        assert session.status == SessionStatus.ACTIVE
        assert session.configuration == {"race/laps": 7}

    def test_dialog_response_without_customization(self, service):
        response = service.respond_to_dialog(1, DialogResponseRequest(response=0))

        assert response.player_id == 1
        assert not response.delivered

    def test_cancel_without_flow(self, service):
        response = service.cancel(1)
        assert response.cancelled is False

    def test_get_session(self, service):
        created = asyncio.run(service.invoke_command("race", CommandRequest(player_id=1)))

        response = service.get_session(created.session.session_id)
        assert response.session_id == created.session.session_id
        assert response.game_name == "Race"

    def test_get_nonexistent_session(self, service):
        response = service.get_session("nonexistent-id")

        assert hasattr(response, "error")
        assert response.error_code == "SESSION_NOT_FOUND"

    def test_disconnect_player_leaves_sessions(self, service):
        async def scenario():
            await service.invoke_command("race", CommandRequest(player_id=1))
            return await service.disconnect_player(1)

        assert asyncio.run(scenario())
        assert service.list_sessions().count == 0
        assert service.get_player(1).error_code == ErrorCode.PLAYER_NOT_FOUND


class TestApp:
    """Tests for the FastAPI application."""

    def test_routes(self, settings):
        app = create_app(GamesService(games=Games(settings=settings)))
        paths = {route.path for route in app.routes}

        assert {
            "/api/v1/health",
            "/api/v1/games",
            "/api/v1/players",
            "/api/v1/players/{player_id}",
            "/api/v1/players/{player_id}/dialog",
            "/api/v1/players/{player_id}/cancel",
            "/api/v1/commands/{command}",
            "/api/v1/sessions",
            "/api/v1/sessions/{session_id}",
        } <= paths

    def test_service_available_on_state(self, settings):
        service = GamesService(games=Games(settings=settings))
        app = create_app(service)
        assert app.state.service is service
