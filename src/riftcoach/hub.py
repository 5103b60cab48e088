# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process fan-out of snapshot and tip events to registered views."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from riftcoach.logging import get_logger

logger = get_logger(__name__)

EventKind = Literal["snapshot", "tip"]
Subscriber = Callable[[Any], Awaitable[None] | None]


class EventHub:
    """Delivers every published event to every current subscriber.

    Views come and go; an event published while a view is not subscribed is
    simply not seen by it.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = {"snapshot": [], "tip": []}

    def subscribe(self, kind: EventKind, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        if kind not in self._subscribers:
            raise ValueError(f"Unknown event kind: {kind}")
        self._subscribers[kind].append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers[kind]:
                self._subscribers[kind].remove(callback)

        return _unsubscribe

    def subscriber_count(self, kind: EventKind) -> int:
        return len(self._subscribers.get(kind, []))

    async def publish(self, kind: EventKind, payload: Any) -> None:
        for callback in list(self._subscribers.get(kind, [])):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("hub_subscriber_failed", kind=kind, error=str(e))
