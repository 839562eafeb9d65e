"""Event Bus - per-client pub/sub for connection and message events.

Delivery is synchronous and in subscription order. A subscriber that raises
is logged and does not stop delivery to the ones after it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ClientEvent(str, Enum):
    """Events published by the client."""

    OPEN = "open"
    CLOSE = "close"
    ERROR = "error"
    MESSAGES = "messages"


EventHandler = Callable[..., Any]


def _key(event: str | ClientEvent) -> str:
    return event.value if isinstance(event, ClientEvent) else event


def _same_handler(existing: EventHandler, handler: EventHandler) -> bool:
    if existing is handler:
        return True
    # Each attribute access creates a new bound method object
    return (
        inspect.ismethod(existing)
        and inspect.ismethod(handler)
        and existing.__self__ is handler.__self__
        and existing.__func__ is handler.__func__
    )


class EventBus:
    """Maps event names to ordered lists of handlers.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(ClientEvent.MESSAGES, print)
        bus.publish(ClientEvent.MESSAGES, ["hello"])
        unsubscribe()
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[EventHandler]] = {}

    def subscribe(self, event: str | ClientEvent, handler: EventHandler) -> Callable[[], None]:
        """Subscribe ``handler`` to ``event``.

        The same handler may be subscribed more than once; it is then called
        once per subscription.

        Returns:
            Unsubscribe function
        """
        key = _key(event)
        self._subscriptions.setdefault(key, []).append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(key, handler)

        return unsubscribe

    def unsubscribe(self, event: str | ClientEvent, handler: EventHandler) -> bool:
        """Remove the first subscription of ``handler``.

        Plain functions match by identity; bound methods match when they wrap
        the same function on the same object.
        """
        handlers = self._subscriptions.get(_key(event))
        if not handlers:
            return False
        for index, existing in enumerate(handlers):
            if _same_handler(existing, handler):
                del handlers[index]
                return True
        return False

    def publish(self, event: str | ClientEvent, *args: Any) -> None:
        """Call every handler subscribed to ``event`` with ``args``."""
        key = _key(event)
        # Copy so handlers may (un)subscribe while we iterate
        for handler in list(self._subscriptions.get(key, [])):
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Error in subscriber for {key}")

    def subscribers(self, event: str | ClientEvent) -> list[EventHandler]:
        return list(self._subscriptions.get(_key(event), []))

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._subscriptions = {}
