# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Scriptable power backend and observation sink for unit tests."""

from __future__ import annotations

import asyncio
from typing import Optional

from omnibase_powerctl.constants_power_control import (
    DEFAULT_NAME_URL,
    DEFAULT_PLATFORM,
    DEFAULT_SERVER_URL,
    PLATFORM_URL,
)
from omnibase_powerctl.enums import EnumInfraTransportType, EnumPowerState
from omnibase_powerctl.errors import BackendInvocationError, ModelInfraErrorContext
from omnibase_powerctl.models import ModelNodeSnapshot, ModelObservationEvent


def make_node(
    node_id: str,
    name: Optional[str],
    endpoint: Optional[str] = "pm-server-1",
    platform: Optional[str] = DEFAULT_PLATFORM,
) -> ModelNodeSnapshot:
    """Build a node snapshot; passing None leaves an attribute unset."""
    values: dict[str, str] = {}
    if platform is not None:
        values[PLATFORM_URL] = platform
    if name is not None:
        values[DEFAULT_NAME_URL] = name
    if endpoint is not None:
        values[DEFAULT_SERVER_URL] = endpoint
    return ModelNodeSnapshot(node_id=node_id, values=values)


class StubPowerBackend:
    """Power backend with scripted behaviour per node name.

    Attributes:
        calls: ``(operation, endpoint, name)`` for every call, in call order
        states: Current power state per node name
    """

    def __init__(
        self,
        states: Optional[dict[str, EnumPowerState]] = None,
        delays: Optional[dict[str, float]] = None,
        failing: Optional[set[str]] = None,
        hanging: Optional[set[str]] = None,
        raising: Optional[dict[str, Exception]] = None,
    ) -> None:
        self.states: dict[str, EnumPowerState] = dict(states or {})
        self.delays = dict(delays or {})
        self.failing = set(failing or ())
        self.hanging = set(hanging or ())
        self.raising = dict(raising or {})
        self.calls: list[tuple[str, str, str]] = []
        self.active = 0
        self.max_active = 0

    async def _call(self, operation: str, endpoint: str, name: str) -> None:
        self.calls.append((operation, endpoint, name))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if name in self.hanging:
                await asyncio.Event().wait()
            delay = self.delays.get(name, 0.0)
            if delay:
                await asyncio.sleep(delay)
            if name in self.raising:
                raise self.raising[name]
            if name in self.failing:
                raise BackendInvocationError(
                    f"stub {operation} failed for {name}",
                    context=ModelInfraErrorContext(
                        transport_type=EnumInfraTransportType.PROCESS,
                        operation=operation,
                        target_name=name,
                    ),
                    exit_code=1,
                )
        finally:
            self.active -= 1

    async def power_on(self, endpoint: str, name: str) -> None:
        await self._call("power_on", endpoint, name)
        self.states[name] = EnumPowerState.ON

    async def power_off(self, endpoint: str, name: str) -> None:
        await self._call("power_off", endpoint, name)
        self.states[name] = EnumPowerState.OFF

    async def query_state(self, endpoint: str, name: str) -> EnumPowerState:
        await self._call("query_state", endpoint, name)
        return self.states.get(name, EnumPowerState.OFF)

    def operations(self, name: str) -> list[str]:
        """Operations invoked for ``name``, in call order."""
        return [op for op, _, called in self.calls if called == name]


class CollectingObservationSink:
    """Observation sink that appends every event to ``events``."""

    def __init__(self) -> None:
        self.events: list[ModelObservationEvent] = []

    async def emit(self, event: ModelObservationEvent) -> None:
        self.events.append(event)

    def values_for(self, target_path: str) -> list[str]:
        return [e.value_id for e in self.events if e.target_path == target_path]


class FailingObservationSink:
    """Observation sink whose ``emit`` always raises."""

    def __init__(self) -> None:
        self.attempts = 0

    async def emit(self, event: ModelObservationEvent) -> None:
        self.attempts += 1
        raise ConnectionError("observation stream unavailable")
