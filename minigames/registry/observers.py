"""
Observers - Owner-keyed subscriber lists with isolated fan-out.

Notification iterates over a snapshot taken before the first callback runs, so
an observer may add or remove observers (itself included) while being
notified. A failing observer is logged and does not stop the others.
"""

from __future__ import annotations
from typing import Any, Callable, Hashable
import logging

logger = logging.getLogger(__name__)


class ObserverList:
    """
    Observers keyed by their owner, notified in registration order.

    Usage:
        observers = ObserverList()
        observers.add(feature, feature_observer)
        observers.notify("on_game_registered", descriptor)
    """

    def __init__(self):
        self._observers: dict[Hashable, Any] = {}

    def add(self, owner: Hashable, observer: Any):
        if owner in self._observers:
            raise ValueError(f"{owner!r} is already observing")
        self._observers[owner] = observer

    def remove(self, owner: Hashable) -> bool:
        return self._observers.pop(owner, None) is not None

    def notify(self, method: str, *args) -> int:
        """
        Call `method` on every observer that implements it.

        Returns the number of observers that failed.
        """
        failures = 0
        for owner, observer in list(self._observers.items()):
            callback = getattr(observer, method, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception:
                failures += 1
                logger.exception("Observer %r failed in %s", owner, method)
        return failures

    def __contains__(self, owner: Hashable) -> bool:
        return owner in self._observers

    def __len__(self) -> int:
        return len(self._observers)

    def clear(self):
        self._observers.clear()


class ReloadObservers(ObserverList):
    """Plain callbacks keyed by owner, called when a capability reloads."""

    def add(self, owner: Hashable, callback: Callable[[], Any]):
        super().add(owner, callback)

    def notify_reload(self) -> int:
        failures = 0
        for owner, callback in list(self._observers.items()):
            try:
                callback()
            except Exception:
                failures += 1
                logger.exception("Reload observer %r failed", owner)
        return failures
