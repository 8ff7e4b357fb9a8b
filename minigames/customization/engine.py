"""
Customization Engine - Resolves a game's settings into a configuration.

Resolution either takes the declared defaults, or walks the requesting player
through a dialog flow in which each setting can be changed before the game
starts. The result maps setting identifiers (`category/name`) to values.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Hashable
import logging
import math

from ..description import GameDescriptor, Setting, SettingType
from ..messages import Message
from .flow import CustomizationFlow

logger = logging.getLogger(__name__)


@dataclass
class CustomizationResult:
    """Outcome of resolving a game's settings."""
    configuration: dict[str, Any] = field(default_factory=dict)
    cancelled: bool = False


class CustomizationEngine:
    """
    Usage:
        engine = CustomizationEngine(dialogs, objects, settings)

        # Defaults only
        result = await engine.resolve(descriptor)

        # Let the player change settings first
        result = await engine.resolve(descriptor, player, interactive=True)
        if result.cancelled:
            ...
    """

    def __init__(self, dialogs=None, objects=None, settings=None):
        self._dialogs = dialogs
        self._objects = objects
        self._settings = settings
        self._flows: dict[Hashable, CustomizationFlow] = {}

    def defaults(self, descriptor: GameDescriptor) -> dict[str, Any]:
        """
        Validated default configuration of the game.

        Raises ConfigurationDataError when a default cannot be used.
        """
        return {
            setting.identifier: deepcopy(setting.validate_value(setting.default))
            for setting in descriptor.settings
        }

    async def resolve(
        self,
        descriptor: GameDescriptor,
        player=None,
        interactive: bool = False,
    ) -> CustomizationResult:
        configuration = self.defaults(descriptor)
        if not interactive or player is None or not descriptor.settings:
            return CustomizationResult(configuration=configuration)
        if self._dialogs is None:
            raise RuntimeError("Interactive customization requires a dialog service")

        flow = self.begin(player)
        try:
            confirmed = await self._run(flow, descriptor, configuration)
        finally:
            self._end(flow)

        if not confirmed:
            logger.info("%s cancelled customization of %s", player.name, descriptor.name)
            return CustomizationResult(configuration=configuration, cancelled=True)

        return CustomizationResult(configuration=configuration)

    # =========================================================================
    # Flows
    # =========================================================================

    def begin(self, player) -> CustomizationFlow:
        """Start a flow for `player`, cancelling any flow they already had."""
        existing = self._flows.get(player.id)
        if existing is not None:
            existing.cancel()

        timeout = None
        if self._settings is not None:
            timeout = self._settings.get_value("games/customization_timeout_sec") or None

        flow = CustomizationFlow(player, self._dialogs, self._objects, timeout=timeout)
        self._flows[player.id] = flow
        self._dialogs.accept_responses(player.id)
        return flow

    def get_flow(self, player_id: Hashable) -> CustomizationFlow | None:
        return self._flows.get(player_id)

    def cancel(self, player_id: Hashable) -> bool:
        """Cancel the player's pending flow. Returns whether there was one."""
        flow = self._flows.get(player_id)
        if flow is None:
            return False
        return flow.cancel()

    def _end(self, flow: CustomizationFlow):
        flow.release()
        if self._flows.get(flow.player.id) is flow:
            del self._flows[flow.player.id]
            self._dialogs.discard(flow.player.id)

    async def _run(
        self,
        flow: CustomizationFlow,
        descriptor: GameDescriptor,
        configuration: dict[str, Any],
    ) -> bool:
        settings = descriptor.settings
        while True:
            items = [Message.GAME_CUSTOMIZE_START] + [
                f"{setting.description}: {setting.summarize(configuration[setting.identifier])}"
                for setting in settings
            ]

            choice = await flow.prompt(descriptor.name, items=items)
            if choice is None:
                return False
            if choice == 0:
                return flow.confirm()
            if not isinstance(choice, int) or not 1 <= choice <= len(settings):
                continue

            setting = settings[choice - 1]
            value = await self._customize(flow, setting, configuration[setting.identifier])
            if flow.is_cancelled:
                return False
            if value is not None:
                configuration[setting.identifier] = setting.validate_value(value)

    async def _customize(self, flow: CustomizationFlow, setting: Setting, current: Any) -> Any:
        if setting.type == SettingType.NUMBER:
            answer = await flow.prompt(
                setting.description,
                message=Message.format(Message.GAME_CUSTOMIZE_NUMBER, setting.description),
            )
            if answer is None:
                return None
            try:
                return int(answer)
            except (TypeError, ValueError, OverflowError):
                pass
            try:
                value = float(answer)
            except (TypeError, ValueError):
                value = math.nan
            if not math.isfinite(value):
                flow.player.send_message(Message.GAME_CUSTOMIZE_INVALID_NUMBER, answer)
                return None
            return value

        if setting.type == SettingType.BOOLEAN:
            choice = await flow.prompt(
                setting.description,
                items=[Message.GAME_CUSTOMIZE_ENABLED, Message.GAME_CUSTOMIZE_DISABLED],
            )
            if choice in (0, 1):
                return choice == 0
            return None

        if setting.type == SettingType.ENUM:
            choice = await flow.prompt(
                setting.description, items=[str(option) for option in setting.options]
            )
            if isinstance(choice, int) and 0 <= choice < len(setting.options):
                return setting.options[choice]
            return None

        return await setting.handler.handle_customization(flow, deepcopy(current))
