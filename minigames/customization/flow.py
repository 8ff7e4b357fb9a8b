"""
Customization Flow - State of one player's interactive customization.

States:
    PENDING -> SELECTING -> CONFIRMED
                         -> CANCELLED

Cancellation is a transition, not an exception: every pending or future
prompt of a cancelled flow returns None, and the code driving the flow
unwinds normally. Markers created through the flow are released when the
flow is released, whatever way it ended.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Sequence
import asyncio
import logging

logger = logging.getLogger(__name__)


class FlowState(Enum):
    PENDING = "pending"
    SELECTING = "selecting"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class CustomizationFlow:
    """
    Usage:
        flow = CustomizationFlow(player, dialogs, objects, timeout=60)
        try:
            choice = await flow.prompt("Race", items=["Start", "Laps: 3"])
            if choice is None:
                ...  # cancelled, dismissed or timed out
        finally:
            flow.release()
    """

    def __init__(self, player, dialogs, objects=None, timeout: float | None = None):
        self.player = player
        self.state = FlowState.PENDING
        self._dialogs = dialogs
        self._objects = objects
        self._timeout = timeout
        self._cancelled = asyncio.Event()
        self._markers: list[int] = []

    @property
    def is_cancelled(self) -> bool:
        return self.state == FlowState.CANCELLED

    @property
    def is_finished(self) -> bool:
        return self.state in (FlowState.CONFIRMED, FlowState.CANCELLED)

    @property
    def marker_count(self) -> int:
        return len(self._markers)

    async def prompt(
        self,
        title: str,
        items: Sequence[str] | None = None,
        message: str | None = None,
    ) -> Any:
        """
        Show a dialog and wait for the player's response.

        Returns None when the flow is cancelled while waiting, when the player
        dismisses the dialog, or when the response does not arrive in time.
        The flow is cancelled in all of those cases.
        """
        if self.is_finished:
            return None

        self.state = FlowState.SELECTING

        dialog = asyncio.ensure_future(
            self._dialogs.prompt(self.player, title, items=items, message=message)
        )
        cancelled = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {dialog, cancelled},
                timeout=self._timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not dialog.done():
                dialog.cancel()

        if dialog not in done or self.is_cancelled:
            if not self.is_cancelled:
                logger.info("Customization by %s timed out", self.player.name)
                self.cancel()
            return None

        response = dialog.result()
        if response is None:
            self.cancel()
        return response

    def create_marker(self, label: str) -> int:
        """Create a transient marker for the player, owned by this flow."""
        if self._objects is None:
            raise RuntimeError("No object manager available for markers")
        handle = self._objects.create_marker(self.player, label)
        self._markers.append(handle)
        return handle

    def confirm(self) -> bool:
        if self.is_finished:
            return False
        self.state = FlowState.CONFIRMED
        return True

    def cancel(self) -> bool:
        if self.is_finished:
            return False
        self.state = FlowState.CANCELLED
        self._cancelled.set()
        return True

    def release(self):
        """Dispose of every marker created through the flow."""
        while self._markers:
            self._objects.dispose(self._markers.pop())
