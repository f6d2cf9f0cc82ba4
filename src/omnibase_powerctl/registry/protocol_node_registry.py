# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Fabric registry protocols.

The node registry and module registry are owned by the fleet fabric. The
controller depends on these narrow interfaces only.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from omnibase_powerctl.models import ModelModuleRegistration, ModelNodeSnapshot


@runtime_checkable
class ProtocolNodeRegistry(Protocol):
    """Read access to the fabric's node records."""

    async def query_read_all(self) -> list[ModelNodeSnapshot]:
        """Return a snapshot of every node the fabric knows about."""
        ...


@runtime_checkable
class ProtocolFabricRegistry(Protocol):
    """Startup registration with the fabric."""

    def register_module(self, registration: ModelModuleRegistration) -> None:
        """Publish the module's mutations, discoverables and services."""
        ...


__all__: list[str] = ["ProtocolFabricRegistry", "ProtocolNodeRegistry"]
