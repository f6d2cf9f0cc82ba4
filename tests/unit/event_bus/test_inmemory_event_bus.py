# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for InMemoryEventBus."""

from __future__ import annotations

import asyncio
from uuid import uuid4

import pytest

from omnibase_powerctl.errors import InfraUnavailableError
from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.models import ModelEventMessage
from omnibase_powerctl.event_bus.topic_constants import (
    CONTENT_TYPE_JSON,
    DISCOVERY_TOPIC,
    EVENT_TYPE_DISCOVERY,
    MUTATION_TOPIC,
)
from omnibase_powerctl.models import ModelObservationEvent
from omnibase_powerctl.runtime.observation_sink import (
    EventBusObservationSink,
    QueueObservationSink,
)


async def _capture(bus: InMemoryEventBus, topic: str) -> list[ModelEventMessage]:
    received: list[ModelEventMessage] = []

    async def handler(msg: ModelEventMessage) -> None:
        received.append(msg)

    await bus.subscribe(topic, "capture", handler)
    return received


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_close(self) -> None:
        bus = InMemoryEventBus(source="powerctl.test")
        assert (await bus.health_check())["healthy"] is False

        await bus.start()
        health = await bus.health_check()
        assert health["healthy"] is True
        assert health["source"] == "powerctl.test"

        await bus.close()
        assert (await bus.health_check())["healthy"] is False

    @pytest.mark.asyncio
    async def test_publish_before_start_raises(self) -> None:
        bus = InMemoryEventBus()

        with pytest.raises(InfraUnavailableError) as exc_info:
            await bus.publish(MUTATION_TOPIC, None, b"{}")

        assert exc_info.value.context["target_name"] == MUTATION_TOPIC

    @pytest.mark.asyncio
    async def test_close_drops_subscriptions(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        await _capture(bus, MUTATION_TOPIC)

        await bus.close()

        assert (await bus.health_check())["subscriptions"] == {}


class TestPublishSubscribe:
    @pytest.mark.asyncio
    async def test_messages_delivered_in_order(self) -> None:
        bus = InMemoryEventBus(source="pm")
        await bus.start()
        received = await _capture(bus, MUTATION_TOPIC)

        for i in range(3):
            await bus.publish(MUTATION_TOPIC, None, str(i).encode())

        assert [m.value for m in received] == [b"0", b"1", b"2"]
        assert [m.offset for m in received] == ["0", "1", "2"]
        assert received[0].headers.source == "pm"
        assert received[0].headers.event_type == MUTATION_TOPIC
        assert (await bus.health_check())["published"] == {MUTATION_TOPIC: 3}
        await bus.close()

    @pytest.mark.asyncio
    async def test_topics_are_isolated(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        mutations = await _capture(bus, MUTATION_TOPIC)
        observations = await _capture(bus, DISCOVERY_TOPIC)

        await bus.publish(DISCOVERY_TOPIC, None, b"obs")

        assert mutations == []
        assert [m.value for m in observations] == [b"obs"]
        await bus.close()

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_delivery(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        received: list[bytes] = []

        async def handler(msg: ModelEventMessage) -> None:
            received.append(msg.value)

        unsubscribe = await bus.subscribe(MUTATION_TOPIC, "g", handler)
        await bus.publish(MUTATION_TOPIC, None, b"a")
        await unsubscribe()
        await unsubscribe()
        await bus.publish(MUTATION_TOPIC, None, b"b")

        assert received == [b"a"]
        await bus.close()

    @pytest.mark.asyncio
    async def test_same_handler_twice_unsubscribes_independently(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        received: list[bytes] = []

        async def handler(msg: ModelEventMessage) -> None:
            received.append(msg.value)

        first = await bus.subscribe(MUTATION_TOPIC, "g", handler)
        await bus.subscribe(MUTATION_TOPIC, "g", handler)
        await first()
        await bus.publish(MUTATION_TOPIC, None, b"x")

        assert received == [b"x"]
        await bus.close()

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_affect_others(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()

        async def broken(msg: ModelEventMessage) -> None:
            raise RuntimeError("subscriber bug")

        await bus.subscribe(MUTATION_TOPIC, "g1", broken)
        received = await _capture(bus, MUTATION_TOPIC)
        await bus.publish(MUTATION_TOPIC, None, b"x")

        assert [m.value for m in received] == [b"x"]
        await bus.close()

    @pytest.mark.asyncio
    async def test_publish_envelope_serializes_model(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        received = await _capture(bus, DISCOVERY_TOPIC)
        correlation_id = uuid4()
        event = ModelObservationEvent.for_node("n1", "/PhysState", "mod", "ON")

        await bus.publish_envelope(
            event, DISCOVERY_TOPIC, event_type=EVENT_TYPE_DISCOVERY, correlation_id=correlation_id
        )

        [message] = received
        assert ModelObservationEvent.model_validate_json(message.value) == event
        assert message.headers.event_type == EVENT_TYPE_DISCOVERY
        assert message.headers.content_type == CONTENT_TYPE_JSON
        assert message.headers.correlation_id == correlation_id
        await bus.close()


class TestObservationSinks:
    @pytest.mark.asyncio
    async def test_event_bus_sink_publishes_on_discovery_topic(self) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        received = await _capture(bus, DISCOVERY_TOPIC)
        sink = EventBusObservationSink(bus)

        await sink.emit(ModelObservationEvent.for_node("n1", "/PhysState", "mod", "OFF"))

        [message] = received
        decoded = ModelObservationEvent.model_validate_json(message.value)
        assert decoded.value_id == "OFF"
        assert message.headers.event_type == EVENT_TYPE_DISCOVERY
        await bus.close()

    @pytest.mark.asyncio
    async def test_queue_sink_many_writers(self) -> None:
        sink = QueueObservationSink()

        await asyncio.gather(
            *(
                sink.emit(ModelObservationEvent.for_node(f"n{i}", "/PhysState", "mod", "ON"))
                for i in range(50)
            )
        )

        assert sink.qsize() == 50
        first = await sink.get()
        assert first.target_path.endswith(":/PhysState")
        assert len(sink.drain_nowait()) == 49
