# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Simulated power backend.

Keeps an in-process power table instead of touching hardware. Used by
``powerctl serve --simulate`` and ``powerctl discover --simulate`` to try
the controller end to end without a powerman server.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from omnibase_powerctl.enums import EnumPowerState

logger = logging.getLogger(__name__)


class HandlerSimulatedPower:
    """Power backend that records state transitions in memory."""

    def __init__(
        self,
        initial_states: Optional[dict[str, EnumPowerState]] = None,
        default_state: EnumPowerState = EnumPowerState.OFF,
        latency_seconds: float = 0.0,
    ) -> None:
        self._states: dict[str, EnumPowerState] = dict(initial_states or {})
        self._default_state = default_state
        self._latency_seconds = latency_seconds

    async def power_on(self, endpoint: str, name: str) -> None:
        await self._settle()
        self._states[name] = EnumPowerState.ON
        logger.info("[SIMULATION] powered ON %s via %s", name, endpoint or "local")

    async def power_off(self, endpoint: str, name: str) -> None:
        await self._settle()
        self._states[name] = EnumPowerState.OFF
        logger.info("[SIMULATION] powered OFF %s via %s", name, endpoint or "local")

    async def query_state(self, endpoint: str, name: str) -> EnumPowerState:
        await self._settle()
        return self._states.get(name, self._default_state)

    def state_of(self, name: str) -> EnumPowerState:
        """Current simulated state of ``name``."""
        return self._states.get(name, self._default_state)

    async def _settle(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": True,
            "handler_type": "simulated",
            "latency_seconds": self._latency_seconds,
        }

    def describe(self) -> dict[str, object]:
        return {
            "handler_type": "simulated",
            "supported_operations": ["power_off", "power_on", "query_state"],
            "nodes": len(self._states),
        }


__all__: list[str] = ["HandlerSimulatedPower"]
