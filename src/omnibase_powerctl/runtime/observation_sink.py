# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Outbound observation sinks.

Concurrency Safety:
    ``emit`` is called from many concurrently running dispatch tasks and
    discovery queries. Every sink here is safe for many writers on one event
    loop and never drops an event.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.topic_constants import (
    DISCOVERY_TOPIC,
    EVENT_TYPE_DISCOVERY,
)
from omnibase_powerctl.models import ModelObservationEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class ProtocolObservationSink(Protocol):
    """Destination for observation events."""

    async def emit(self, event: ModelObservationEvent) -> None:
        """Deliver one observation event."""
        ...


class QueueObservationSink:
    """Many-writer / single-reader sink backed by an unbounded asyncio.Queue."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ModelObservationEvent] = asyncio.Queue()

    async def emit(self, event: ModelObservationEvent) -> None:
        self._queue.put_nowait(event)

    async def get(self) -> ModelObservationEvent:
        """Wait for and return the next observation (single reader)."""
        return await self._queue.get()

    def drain_nowait(self) -> list[ModelObservationEvent]:
        """Return every queued observation without waiting."""
        events: list[ModelObservationEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def qsize(self) -> int:
        return self._queue.qsize()


class EventBusObservationSink:
    """Publishes observations as JSON on the event bus discovery topic."""

    def __init__(self, event_bus: InMemoryEventBus, topic: str = DISCOVERY_TOPIC) -> None:
        self._event_bus = event_bus
        self._topic = topic

    async def emit(self, event: ModelObservationEvent) -> None:
        await self._event_bus.publish_envelope(
            event,
            self._topic,
            event_type=EVENT_TYPE_DISCOVERY,
            correlation_id=event.correlation_id,
        )
        logger.debug(
            "Observation published",
            extra={
                "target_path": event.target_path,
                "value_id": event.value_id,
                "topic": self._topic,
            },
        )


__all__: list[str] = [
    "EventBusObservationSink",
    "ProtocolObservationSink",
    "QueueObservationSink",
]
