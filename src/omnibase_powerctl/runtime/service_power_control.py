# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Service - the module's long-running entry point.

The service owns an inbound queue of mutation requests. ``run()`` announces
the service as running, then consumes the queue one event at a time and
hands each valid request to the MutationDispatcher. Dispatch never blocks
the loop; backend work runs in the dispatcher's own tasks.

Inbound items are either already-decoded ``ModelMutationRequest`` objects
(``submit``) or raw event bus messages (``attach``). Raw messages are
decoded here; anything that is not a well-formed mutation event is logged
at ERROR and skipped.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, Union

from pydantic import ValidationError

from omnibase_powerctl.constants_power_control import SERVICE_STATE_URL
from omnibase_powerctl.enums import EnumInfraTransportType, EnumServiceState
from omnibase_powerctl.errors import EventProtocolError, ModelInfraErrorContext
from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.models import ModelEventMessage
from omnibase_powerctl.event_bus.topic_constants import (
    EVENT_TYPE_STATE_MUTATION,
    MUTATION_TOPIC,
)
from omnibase_powerctl.models import (
    ModelMutationRequest,
    ModelObservationEvent,
    ModelPowerControlConfig,
    ModelReconcileResult,
)
from omnibase_powerctl.runtime.discovery_reconciler import DiscoveryReconciler
from omnibase_powerctl.runtime.mutation_dispatcher import MutationDispatcher
from omnibase_powerctl.runtime.observation_sink import ProtocolObservationSink

logger = logging.getLogger(__name__)

_InboundItem = Union[ModelMutationRequest, ModelEventMessage, None]


def decode_mutation_message(message: ModelEventMessage) -> ModelMutationRequest:
    """Decode an event bus message into a mutation request.

    Raises:
        EventProtocolError: If the event type is not a state mutation or the
            payload is not a valid mutation request.
    """
    context = ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.EVENT_BUS,
        operation="decode_mutation",
        target_name=message.topic,
        correlation_id=message.headers.correlation_id,
    )
    if message.headers.event_type != EVENT_TYPE_STATE_MUTATION:
        raise EventProtocolError(
            f"got unexpected non-mutation event: {message.headers.event_type}",
            context=context,
        )
    try:
        payload = json.loads(message.value.decode("utf-8"))
        return ModelMutationRequest.model_validate(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EventProtocolError(
            f"mutation event payload is not valid JSON: {e}",
            context=context,
        ) from e
    except ValidationError as e:
        raise EventProtocolError(
            f"mutation event payload failed validation: {e.error_count()} error(s)",
            context=context,
            errors=e.errors(include_url=False),
        ) from e


class ServicePowerControl:
    """Service loop wiring inbound mutations to the dispatcher.

    Example:
        >>> service = ServicePowerControl(config, dispatcher, reconciler, sink)
        >>> await service.attach(bus)
        >>> runner = asyncio.create_task(service.run())
        >>> ...
        >>> await service.stop()
    """

    def __init__(
        self,
        config: ModelPowerControlConfig,
        dispatcher: MutationDispatcher,
        reconciler: DiscoveryReconciler,
        sink: ProtocolObservationSink,
    ) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._reconciler = reconciler
        self._sink = sink
        self._inbound: asyncio.Queue[_InboundItem] = asyncio.Queue()
        self._unsubscribe: Optional[Callable[[], Awaitable[None]]] = None
        self._running = False

    @property
    def config(self) -> ModelPowerControlConfig:
        return self._config

    @property
    def dispatcher(self) -> MutationDispatcher:
        return self._dispatcher

    @property
    def reconciler(self) -> DiscoveryReconciler:
        return self._reconciler

    @property
    def is_running(self) -> bool:
        return self._running

    def update_config(self, config: ModelPowerControlConfig) -> None:
        """Swap the running configuration for subsequent requests and sweeps."""
        self._config = config
        self._dispatcher.update_config(config)
        self._reconciler.update_config(config)
        logger.info(
            "configuration updated",
            extra={"node_count": len(config.node_names), "platform": config.platform},
        )

    async def attach(self, event_bus: InMemoryEventBus) -> None:
        """Feed mutation topic messages from ``event_bus`` into the service."""

        async def _on_message(message: ModelEventMessage) -> None:
            self._inbound.put_nowait(message)

        self._unsubscribe = await event_bus.subscribe(
            MUTATION_TOPIC,
            self._config.module_name,
            _on_message,
        )

    async def detach(self) -> None:
        if self._unsubscribe is not None:
            await self._unsubscribe()
            self._unsubscribe = None

    def submit(self, request: ModelMutationRequest) -> None:
        """Queue an already-decoded mutation request."""
        self._inbound.put_nowait(request)

    async def trigger_discovery(self) -> ModelReconcileResult:
        """Run one discovery sweep now."""
        return await self._reconciler.reconcile_all()

    async def _announce(self) -> None:
        await self._sink.emit(
            ModelObservationEvent.for_node(
                self._config.self_node_id,
                SERVICE_STATE_URL,
                self._config.module_name,
                EnumServiceState.RUN.value,
            )
        )

    def _dispatch(self, item: ModelMutationRequest | ModelEventMessage) -> None:
        if isinstance(item, ModelEventMessage):
            try:
                request = decode_mutation_message(item)
            except EventProtocolError as e:
                logger.error("%s", e, extra=e.context)
                return
        else:
            request = item
        self._dispatcher.handle(request)

    async def run(self) -> None:
        """Announce the service and process inbound events until stopped."""
        self._running = True
        await self._announce()
        logger.info(
            "power control service running",
            extra={"module_name": self._config.module_name},
        )
        try:
            while True:
                item = await self._inbound.get()
                if item is None:
                    break
                self._dispatch(item)
        finally:
            self._running = False
            logger.info("power control service stopped")

    async def stop(self) -> None:
        """Ask ``run()`` to return once the events queued so far are handled."""
        await self.detach()
        self._inbound.put_nowait(None)


__all__: list[str] = ["ServicePowerControl", "decode_mutation_message"]
