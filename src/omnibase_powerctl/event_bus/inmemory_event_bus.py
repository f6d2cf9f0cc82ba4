# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory stand-in for the fabric event stream.

``powerctl serve`` runs against this bus when no fabric is attached: the
service consumes mutation requests from ``MUTATION_TOPIC`` and observations
are published to ``DISCOVERY_TOPIC``. Delivery is synchronous with
``publish()``, in subscription order, and a subscriber that raises is logged
without affecting the others.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import Counter, defaultdict
from collections.abc import Awaitable, Callable
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from omnibase_powerctl.enums import EnumInfraTransportType
from omnibase_powerctl.errors import InfraUnavailableError, ModelInfraErrorContext
from omnibase_powerctl.event_bus.models import ModelEventHeaders, ModelEventMessage
from omnibase_powerctl.event_bus.topic_constants import CONTENT_TYPE_JSON

logger = logging.getLogger(__name__)

MessageHandler = Callable[[ModelEventMessage], Awaitable[None]]


class InMemoryEventBus:
    """Topic fan-out between the controller's components on one event loop.

    Attributes:
        source: Producer identifier stamped on messages published without
            explicit headers
    """

    def __init__(self, source: str = "powerctl") -> None:
        self._source = source
        # topic -> subscription id -> (group_id, handler)
        self._handlers: dict[str, dict[int, tuple[str, MessageHandler]]] = defaultdict(dict)
        self._subscription_ids = itertools.count()
        self._published: Counter[str] = Counter()
        self._lock = asyncio.Lock()
        self._started = False

    @property
    def source(self) -> str:
        return self._source

    async def start(self) -> None:
        async with self._lock:
            self._started = True
        logger.info("event bus started", extra={"source": self._source})

    async def publish(
        self,
        topic: str,
        key: Optional[bytes],
        value: bytes,
        headers: Optional[ModelEventHeaders] = None,
    ) -> None:
        """Deliver ``value`` to every handler subscribed to ``topic``.

        Raises:
            InfraUnavailableError: If the bus has not been started
        """
        if not self._started:
            raise InfraUnavailableError(
                f"event bus not started, cannot publish to {topic!r}",
                context=ModelInfraErrorContext(
                    transport_type=EnumInfraTransportType.EVENT_BUS,
                    operation="publish",
                    target_name=topic,
                ),
            )

        async with self._lock:
            sequence = self._published[topic]
            self._published[topic] += 1
            handlers = list(self._handlers[topic].values())

        message = ModelEventMessage(
            topic=topic,
            key=key,
            value=value,
            headers=headers or ModelEventHeaders(source=self._source, event_type=topic),
            offset=str(sequence),
        )

        for group_id, handler in handlers:
            try:
                await handler(message)
            except Exception:
                logger.exception(
                    "handler for %s failed",
                    topic,
                    extra={
                        "topic": topic,
                        "group_id": group_id,
                        "correlation_id": str(message.headers.correlation_id),
                    },
                )

    async def publish_envelope(
        self,
        envelope: BaseModel,
        topic: str,
        event_type: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Publish ``envelope`` as JSON with a matching event type header."""
        headers = ModelEventHeaders(
            source=self._source,
            event_type=event_type or topic,
            content_type=CONTENT_TYPE_JSON,
            **({"correlation_id": correlation_id} if correlation_id is not None else {}),
        )
        await self.publish(topic, None, envelope.model_dump_json().encode("utf-8"), headers)

    async def subscribe(
        self,
        topic: str,
        group_id: str,
        on_message: MessageHandler,
    ) -> Callable[[], Awaitable[None]]:
        """Register ``on_message`` for ``topic``.

        Returns:
            Async callable removing the subscription; calling it twice is harmless
        """
        async with self._lock:
            subscription_id = next(self._subscription_ids)
            self._handlers[topic][subscription_id] = (group_id, on_message)
        logger.debug("subscribed", extra={"topic": topic, "group_id": group_id})

        async def unsubscribe() -> None:
            async with self._lock:
                removed = self._handlers[topic].pop(subscription_id, None)
            if removed is not None:
                logger.debug("unsubscribed", extra={"topic": topic, "group_id": group_id})

        return unsubscribe

    async def close(self) -> None:
        async with self._lock:
            self._handlers.clear()
            self._started = False
        logger.info("event bus closed", extra={"source": self._source})

    async def health_check(self) -> dict[str, object]:
        """Return started flag plus per-topic subscription and publish counts."""
        async with self._lock:
            subscriptions = {
                topic: len(handlers) for topic, handlers in self._handlers.items() if handlers
            }
            published = dict(self._published)
        return {
            "healthy": self._started,
            "source": self._source,
            "subscriptions": subscriptions,
            "published": published,
        }


__all__: list[str] = ["InMemoryEventBus", "MessageHandler"]
