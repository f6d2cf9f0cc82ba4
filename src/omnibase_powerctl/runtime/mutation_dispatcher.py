# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Mutation Dispatcher - executes PhysState transitions through a power backend.

``handle()`` validates a mutation request and hands the backend call to an
independent asyncio task, so a slow or hung backend call for one node never
delays the next request. In-flight backend calls are capped by a semaphore
sized from ``max_in_flight``.

Dispatch by transition:
    UKtoOFF             no backend action; fabric discovery settles the state
    OFFtoON             power on  -> observe /PhysState = ON
    ONtoOFF, HANGtoOFF  power off -> observe /PhysState = OFF
    UKtoHANG, unknown   debug log only

Failure Handling:
    Missing attributes, admission failures and backend failures are logged
    at ERROR (one record per failed request) and emit nothing. The
    scheduler's own deadline routes the node to HANG. Nothing is retried.

No lock is held across the backend call, so an abandoned dispatch leaves no
state behind. A late observation is still emitted; the scheduler decides
whether to accept it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Final, Optional
from uuid import UUID

from omnibase_powerctl.constants_power_control import PHYS_STATE_URL
from omnibase_powerctl.enums import EnumMutationType, EnumPowerState
from omnibase_powerctl.errors import (
    AdmissionError,
    AttributeResolutionError,
    BackendInvocationError,
)
from omnibase_powerctl.handlers.protocol_power_backend import ProtocolPowerBackend
from omnibase_powerctl.models import (
    ModelMutationRequest,
    ModelObservationEvent,
    ModelPowerControlConfig,
)
from omnibase_powerctl.runtime.admission_policy import (
    build_admission_policy,
    check_admission,
    resolve_power_attributes,
)
from omnibase_powerctl.runtime.observation_sink import ProtocolObservationSink
from omnibase_powerctl.runtime.transition_table import (
    TRANSITION_HANG_TO_OFF,
    TRANSITION_OFF_TO_ON,
    TRANSITION_ON_TO_OFF,
    TRANSITION_UK_TO_OFF,
)

logger = logging.getLogger(__name__)

# Transitions that drive the backend, and the state observed on success
_POWER_ACTIONS: Final[dict[str, EnumPowerState]] = {
    TRANSITION_OFF_TO_ON: EnumPowerState.ON,
    TRANSITION_ON_TO_OFF: EnumPowerState.OFF,
    TRANSITION_HANG_TO_OFF: EnumPowerState.OFF,
}


class MutationDispatcher:
    """Executes mutation requests concurrently against a power backend."""

    def __init__(
        self,
        backend: ProtocolPowerBackend,
        sink: ProtocolObservationSink,
        config: ModelPowerControlConfig,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            backend: Power backend used for on/off actions
            sink: Destination for observation events
            config: Allow-list, platform and attribute paths
        """
        self._backend = backend
        self._sink = sink
        self._config = config
        self._policy = build_admission_policy(config)
        self._semaphore = asyncio.Semaphore(config.max_in_flight)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> ModelPowerControlConfig:
        return self._config

    @property
    def in_flight(self) -> int:
        """Number of dispatched actions that have not finished."""
        return len(self._tasks)

    def update_config(self, config: ModelPowerControlConfig) -> None:
        """Apply a new configuration to subsequent requests.

        Actions already in flight keep the configuration they started with.
        ``max_in_flight`` only takes effect on a new dispatcher.
        """
        if config.max_in_flight != self._config.max_in_flight:
            logger.warning(
                "max_in_flight change from %d to %d ignored until restart",
                self._config.max_in_flight,
                config.max_in_flight,
            )
        self._config = config
        self._policy = build_admission_policy(config)

    def handle(self, request: ModelMutationRequest) -> Optional[asyncio.Task[None]]:
        """Validate ``request`` and dispatch its backend action.

        Must be called from a running event loop. Never waits for the
        backend. Returns the scheduled task, or None when nothing was
        dispatched.
        """
        config = self._config
        node = request.node
        extra = {
            "node_id": node.node_id,
            "transition": request.transition_name,
            "correlation_id": str(request.correlation_id),
        }

        try:
            name, endpoint = resolve_power_attributes(
                node, config, request.correlation_id
            )
        except AttributeResolutionError as e:
            logger.error("%s", e, extra={**extra, **e.context})
            return None

        if request.mutation_type == EnumMutationType.INTERRUPT:
            logger.debug("interrupt for %s: nothing to do", name, extra=extra)
            return None

        transition_name = request.transition_name
        if transition_name == TRANSITION_UK_TO_OFF:
            logger.debug("%s for %s left to discovery", transition_name, name, extra=extra)
            return None

        target = _POWER_ACTIONS.get(transition_name)
        if target is None:
            logger.debug("unexpected event: %s", transition_name, extra=extra)
            return None

        try:
            check_admission(node, name, self._policy, config, request.correlation_id)
        except AdmissionError as e:
            logger.error("%s", e, extra={**extra, **e.context})
            return None

        task = asyncio.get_running_loop().create_task(
            self._execute(
                target,
                endpoint,
                name,
                node.node_id,
                config.module_name,
                request.correlation_id,
            ),
            name=f"powerctl-{transition_name}-{name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _execute(
        self,
        target: EnumPowerState,
        endpoint: str,
        name: str,
        node_id: str,
        producer_id: str,
        correlation_id: UUID,
    ) -> None:
        """Run one backend action and emit the resulting observation."""
        operation = "power_on" if target == EnumPowerState.ON else "power_off"
        extra = {
            "node": name,
            "endpoint": endpoint,
            "operation": operation,
            "correlation_id": str(correlation_id),
        }

        async with self._semaphore:
            try:
                if target == EnumPowerState.ON:
                    await self._backend.power_on(endpoint, name)
                else:
                    await self._backend.power_off(endpoint, name)
            except BackendInvocationError as e:
                logger.error(
                    "%s command for node %s failed: %s",
                    operation,
                    name,
                    e,
                    extra=extra,
                )
                return
            except Exception as e:
                logger.error(
                    "%s command for node %s failed unexpectedly: %s",
                    operation,
                    name,
                    e,
                    exc_info=True,
                    extra=extra,
                )
                return

        logger.debug("%s command for node %s succeeded", operation, name, extra=extra)
        try:
            await self._sink.emit(
                ModelObservationEvent.for_node(
                    node_id,
                    PHYS_STATE_URL,
                    producer_id,
                    target.value,
                    correlation_id=correlation_id,
                )
            )
        except Exception as e:
            logger.error(
                "failed to emit %s for node %s: %s",
                target.value,
                name,
                e,
                exc_info=True,
                extra=extra,
            )

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight actions to finish.

        Returns:
            True when every action finished, False when ``timeout`` elapsed.
        """
        if not self._tasks:
            return True
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        return not pending

    async def cancel_all(self) -> None:
        """Cancel every in-flight action and wait for the cancellations."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


__all__: list[str] = ["MutationDispatcher"]
