"""
Change notification hooks.

Replaces reactive published properties: owners publish a new immutable
value, listeners receive it after the owner's state is already updated.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)

type Listener[T] = Callable[[T], None]
type Unsubscribe = Callable[[], None]

_NOTHING = object()


class Listeners[T]:
    """
    Ordered listener registry.

    A listener that raises is logged and skipped; the remaining listeners
    still run and the publisher never sees the exception.
    """

    __slots__ = ("_listeners", "_owner", "_delivery", "_delivered")

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self._listeners: list[Listener[T]] = []
        self._delivery = threading.RLock()
        self._delivered: object = _NOTHING

    def subscribe(self, listener: Listener[T]) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, latest: Callable[[], T]) -> None:
        """
        Deliver the owner's current value.

        Deliveries are serialised and always read the value at delivery
        time, so a slow listener can delay a newer value but never receive
        it before an older one. A value already delivered is not repeated.
        """
        with self._delivery:
            value = latest()
            if value is self._delivered:
                return
            self._delivered = value
            self.notify(value)

    def notify(self, value: T) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("listener_failed", owner=self._owner)

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = ("Listener", "Unsubscribe", "Listeners")
