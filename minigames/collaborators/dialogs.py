"""
Dialog service - Asks players questions and waits for their answers.

Responses can arrive while a dialog is open. While a player is accepting
responses (a customization flow is live) an early response is queued for the
next dialog; outside of that window responses are dropped.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Any, Hashable, Sequence
import asyncio
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dialog:
    """A dialog as it was shown to a player."""
    title: str
    items: tuple[str, ...] = ()
    message: str | None = None


class DialogService:
    def __init__(self):
        self._queued: dict[Hashable, deque] = {}
        self._pending: dict[Hashable, asyncio.Future] = {}
        self._accepting: set[Hashable] = set()
        self.last_dialog: dict[Hashable, Dialog] = {}

    async def prompt(
        self,
        player,
        title: str,
        items: Sequence[str] | None = None,
        message: str | None = None,
    ) -> Any:
        """
        Show a dialog to the player and wait for the response.

        Returns the index of the chosen item for list dialogs, the entered
        text for questions, or None when the player dismissed the dialog.
        """
        self.last_dialog[player.id] = Dialog(
            title=title, items=tuple(items or ()), message=message
        )

        queue = self._queued.get(player.id)
        if queue:
            response = queue.popleft()
            await asyncio.sleep(0)
            return response

        future = asyncio.get_running_loop().create_future()
        self._pending[player.id] = future
        try:
            return await future
        finally:
            if self._pending.get(player.id) is future:
                del self._pending[player.id]

    def accept_responses(self, player_id: Hashable):
        """Queue responses that arrive before the player's next dialog opens."""
        self._accepting.add(player_id)

    def discard(self, player_id: Hashable):
        """Stop accepting responses for the player and drop queued ones."""
        self._accepting.discard(player_id)
        self._queued.pop(player_id, None)

    def respond_to_dialog(self, player_id: Hashable, response: Any) -> bool:
        """
        Answer the player's open dialog, or queue the answer for the next one.

        Returns True when an open dialog received the response. Responses for
        players that are not accepting any are dropped.
        """
        future = self._pending.get(player_id)
        if future is not None and not future.done():
            future.set_result(response)
            return True

        if player_id not in self._accepting:
            logger.debug("Dropped dialog response from %s: no dialog expected", player_id)
            return False

        self._queued.setdefault(player_id, deque()).append(response)
        return False

    def has_open_dialog(self, player_id: Hashable) -> bool:
        future = self._pending.get(player_id)
        return future is not None and not future.done()
