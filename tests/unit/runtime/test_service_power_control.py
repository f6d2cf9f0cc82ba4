# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ServicePowerControl and inbound event decoding."""

from __future__ import annotations

import asyncio
import json
import logging

import pytest

from omnibase_powerctl.errors import EventProtocolError
from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.models import ModelEventHeaders, ModelEventMessage
from omnibase_powerctl.event_bus.topic_constants import (
    EVENT_TYPE_STATE_MUTATION,
    MUTATION_TOPIC,
)
from omnibase_powerctl.models import ModelMutationRequest, ModelPowerControlConfig
from omnibase_powerctl.registry.inmemory_node_registry import InMemoryNodeRegistry
from omnibase_powerctl.runtime.discovery_reconciler import DiscoveryReconciler
from omnibase_powerctl.runtime.mutation_dispatcher import MutationDispatcher
from omnibase_powerctl.runtime.service_power_control import (
    ServicePowerControl,
    decode_mutation_message,
)
from tests.helpers.power_stubs import (
    CollectingObservationSink,
    StubPowerBackend,
    make_node,
)


def _message(value: bytes, event_type: str = EVENT_TYPE_STATE_MUTATION) -> ModelEventMessage:
    return ModelEventMessage(
        topic=MUTATION_TOPIC,
        key=None,
        value=value,
        headers=ModelEventHeaders(source="test", event_type=event_type),
        offset="0",
        partition=0,
    )


def _request(transition: str = "OFFtoON", name: str = "node01") -> ModelMutationRequest:
    return ModelMutationRequest(
        transition_name=transition,
        node=make_node(f"id-{name}", name),
    )


@pytest.fixture
def service(
    power_config: ModelPowerControlConfig,
    stub_backend: StubPowerBackend,
    collecting_sink: CollectingObservationSink,
) -> ServicePowerControl:
    dispatcher = MutationDispatcher(stub_backend, collecting_sink, power_config)
    reconciler = DiscoveryReconciler(
        InMemoryNodeRegistry([make_node("id-node01", "node01")]),
        stub_backend,
        collecting_sink,
        power_config,
    )
    return ServicePowerControl(power_config, dispatcher, reconciler, collecting_sink)


async def _wait_for_events(sink: CollectingObservationSink, count: int) -> None:
    for _ in range(200):
        if len(sink.events) >= count:
            return
        await asyncio.sleep(0.005)
    raise AssertionError(f"expected {count} events, got {len(sink.events)}")


class TestDecodeMutationMessage:
    def test_valid_message(self) -> None:
        request = _request()
        decoded = decode_mutation_message(_message(request.model_dump_json().encode()))
        assert decoded == request

    def test_wrong_event_type(self) -> None:
        with pytest.raises(EventProtocolError, match="non-mutation event"):
            decode_mutation_message(_message(b"{}", event_type="discovery"))

    def test_invalid_json(self) -> None:
        with pytest.raises(EventProtocolError, match="not valid JSON"):
            decode_mutation_message(_message(b"{not json"))

    def test_non_utf8_payload(self) -> None:
        with pytest.raises(EventProtocolError, match="not valid JSON"):
            decode_mutation_message(_message(b"\xff\xfe"))

    def test_schema_violation(self) -> None:
        payload = json.dumps({"transition_name": "OFFtoON"}).encode()
        with pytest.raises(EventProtocolError, match="failed validation"):
            decode_mutation_message(_message(payload))


class TestServiceLoop:
    @pytest.mark.asyncio
    async def test_run_announces_service_state(
        self,
        service: ServicePowerControl,
        collecting_sink: CollectingObservationSink,
    ) -> None:
        runner = asyncio.create_task(service.run())
        await _wait_for_events(collecting_sink, 1)
        assert service.is_running

        await service.stop()
        await asyncio.wait_for(runner, timeout=1.0)

        announce = collecting_sink.events[0]
        assert announce.target_path == "self:/Services/powermancontrol/State"
        assert announce.value_id == "RUN"
        assert not service.is_running

    @pytest.mark.asyncio
    async def test_submitted_request_is_dispatched(
        self,
        service: ServicePowerControl,
        stub_backend: StubPowerBackend,
        collecting_sink: CollectingObservationSink,
    ) -> None:
        runner = asyncio.create_task(service.run())
        service.submit(_request("OFFtoON"))
        await _wait_for_events(collecting_sink, 2)
        await service.stop()
        await runner

        assert stub_backend.operations("node01") == ["power_on"]
        assert collecting_sink.values_for("id-node01:/PhysState") == ["ON"]

    @pytest.mark.asyncio
    async def test_bus_messages_are_decoded_and_malformed_ones_skipped(
        self,
        service: ServicePowerControl,
        stub_backend: StubPowerBackend,
        collecting_sink: CollectingObservationSink,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        bus = InMemoryEventBus(source="powerctl.test")
        await bus.start()
        await service.attach(bus)
        runner = asyncio.create_task(service.run())

        with caplog.at_level(logging.ERROR):
            await bus.publish(MUTATION_TOPIC, None, b"garbage")
            await bus.publish_envelope(
                _request("ONtoOFF", "node02"),
                MUTATION_TOPIC,
                event_type=EVENT_TYPE_STATE_MUTATION,
            )
            await _wait_for_events(collecting_sink, 2)
            await service.stop()
            await runner

        await bus.close()

        assert stub_backend.operations("node02") == ["power_off"]
        assert collecting_sink.values_for("id-node02:/PhysState") == ["OFF"]
        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(errors) == 1
        assert "non-mutation event" in errors[0].getMessage()

    @pytest.mark.asyncio
    async def test_stop_detaches_from_bus(self, service: ServicePowerControl) -> None:
        bus = InMemoryEventBus()
        await bus.start()
        await service.attach(bus)
        assert (await bus.health_check())["subscriptions"] == {MUTATION_TOPIC: 1}

        await service.stop()

        assert (await bus.health_check())["subscriptions"] == {}
        await bus.close()

    @pytest.mark.asyncio
    async def test_update_config_reaches_dispatcher_and_reconciler(
        self,
        service: ServicePowerControl,
        power_config: ModelPowerControlConfig,
    ) -> None:
        new_config = power_config.model_copy(update={"node_names": ["node09"]})

        service.update_config(new_config)

        assert service.config is new_config
        assert service.dispatcher.config is new_config

    @pytest.mark.asyncio
    async def test_trigger_discovery(
        self,
        service: ServicePowerControl,
        collecting_sink: CollectingObservationSink,
    ) -> None:
        result = await service.trigger_discovery()

        assert result.observations_emitted == 1
        assert collecting_sink.values_for("id-node01:/PhysState") == ["OFF"]
