# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Backend Protocol.

The minimal interface the dispatcher and reconciler need from a
power-control backend: turn a node on, turn it off, query its state.

Concurrency Safety:
    Implementations MUST be safe for concurrent async access. The dispatcher
    runs one backend call per in-flight mutation and does not serialize
    calls across nodes.

Error Contract:
    - power_on / power_off raise BackendInvocationError on failure
    - query_state raises BackendInvocationError when the query cannot run
      and DiscoveryParseError when its result names no state for the node
    - No retries; no internal timeout
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from omnibase_powerctl.enums import EnumPowerState


@runtime_checkable
class ProtocolPowerBackend(Protocol):
    """Protocol for out-of-band power control backends."""

    async def power_on(self, endpoint: str, name: str) -> None:
        """Power on node ``name`` through the backend at ``endpoint``."""
        ...

    async def power_off(self, endpoint: str, name: str) -> None:
        """Power off node ``name`` through the backend at ``endpoint``."""
        ...

    async def query_state(self, endpoint: str, name: str) -> EnumPowerState:
        """Return the observed power state of node ``name``."""
        ...


__all__: list[str] = ["ProtocolPowerBackend"]
