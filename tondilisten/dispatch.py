"""Per-event listeners that route node notifications to their channels."""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import ErrorKind, ServerError
from .events import EventType
from .pool import PoolError

_log = logging.getLogger(__name__)

_WRPC_EVENT = "wrpc-event"
_ids = itertools.count()


def _next_id() -> int:
    # Time-based like the node's own ids, made unique within the process.
    return time.time_ns() + next(_ids)


@dataclass(frozen=True)
class Notification:
    """A notification received from the node."""

    event_type: str
    data: Any
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationChannel:
    """A queue of notifications; ``maxsize`` of 0 means unbounded."""

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[Notification] = asyncio.Queue(maxsize)

    def __len__(self) -> int:
        return self._queue.qsize()

    async def send(self, notification: Notification) -> None:
        """Put a notification on the channel, waiting if it is full."""
        await self._queue.put(notification)

    async def receive(self) -> Notification:
        """Take the next notification, waiting for one if none is queued."""
        return await self._queue.get()


@dataclass
class Listener:
    """A subscription to one event type with the channel it delivers to."""

    event_type: EventType
    channel: NotificationChannel = field(default_factory=NotificationChannel)
    id: int = field(default_factory=_next_id)

    async def handle_event(self, event_data: Any) -> None:
        """Wrap ``event_data`` in a notification and deliver it."""
        _log.debug("Listener %s received %s", self.id, self.event_type)
        try:
            await self.channel.send(Notification(event_type=_WRPC_EVENT, data=event_data))
        except Exception as exc:
            raise PoolError(f"Failed to send wRPC event: {exc}") from exc


class ListenerManager:
    """One listener per subscribed event type."""

    def __init__(self, events) -> None:
        self._listeners: dict[EventType, Listener] = {}
        for event in events:
            event_type = EventType(event)
            listener = Listener(event_type)
            _log.info("Subscribing to wRPC event: %s with ID: %s", event_type, listener.id)
            self._listeners[event_type] = listener

    def get(self, event_type: EventType) -> NotificationChannel:
        """The channel for ``event_type``; raise ServerError if it is not subscribed."""
        listener = self._listeners.get(event_type)
        if listener is None:
            raise ServerError("EventType not found", ErrorKind.NOT_FOUND)
        return listener.channel

    def has_event(self, event_type: EventType) -> bool:
        """Whether ``event_type`` is subscribed."""
        return event_type in self._listeners

    def active_events(self) -> list[EventType]:
        """Every subscribed event type."""
        return list(self._listeners)

    def listener_count(self) -> int:
        """How many listeners there are."""
        return len(self._listeners)

    async def handle_event(self, event_data: Any) -> None:
        """Route ``event_data`` by its ``type`` field to the matching listener.

        Raises PoolError if the type is missing; unknown or unsubscribed
        types are dropped.
        """
        name = event_data.get("type") if isinstance(event_data, dict) else None
        if not isinstance(name, str):
            raise PoolError("Missing event type")
        try:
            event_type = EventType.parse(name)
        except ValueError:
            _log.warning("Unknown event type: %s", name)
            return
        listener = self._listeners.get(event_type)
        if listener is not None:
            await listener.handle_event(event_data)