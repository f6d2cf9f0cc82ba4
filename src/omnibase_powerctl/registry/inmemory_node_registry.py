# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory fabric registries for local runs and testing."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from omnibase_powerctl.models import ModelModuleRegistration, ModelNodeSnapshot

logger = logging.getLogger(__name__)


class InMemoryNodeRegistry:
    """Node registry backed by a dict keyed by node ID.

    ``query_read_all`` returns the records in insertion order. Snapshots are
    immutable, so callers cannot modify the registry through them.
    """

    def __init__(self, nodes: Iterable[ModelNodeSnapshot] = ()) -> None:
        self._nodes: dict[str, ModelNodeSnapshot] = {}
        for node in nodes:
            self.upsert(node)

    def upsert(self, node: ModelNodeSnapshot) -> None:
        """Insert or replace the record for ``node.node_id``."""
        self._nodes[node.node_id] = node

    def remove(self, node_id: str) -> bool:
        """Remove a node record. Returns False when it was not present."""
        return self._nodes.pop(node_id, None) is not None

    def get(self, node_id: str) -> ModelNodeSnapshot | None:
        return self._nodes.get(node_id)

    async def query_read_all(self) -> list[ModelNodeSnapshot]:
        return list(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)


class InMemoryFabricRegistry:
    """Records module registrations published at startup."""

    def __init__(self) -> None:
        self._registrations: dict[str, ModelModuleRegistration] = {}

    def register_module(self, registration: ModelModuleRegistration) -> None:
        if registration.module_name in self._registrations:
            logger.warning(
                "Module %s registered twice; replacing previous registration",
                registration.module_name,
            )
        self._registrations[registration.module_name] = registration
        logger.info(
            "Registered module %s",
            registration.module_name,
            extra={
                "mutations": sorted(registration.mutations),
                "discoverables": sorted(registration.discoverables),
                "services": [s.service_id for s in registration.services],
            },
        )

    def get(self, module_name: str) -> ModelModuleRegistration | None:
        return self._registrations.get(module_name)

    def list_modules(self) -> list[str]:
        return sorted(self._registrations)


__all__: list[str] = ["InMemoryFabricRegistry", "InMemoryNodeRegistry"]
