# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Fabric registry interfaces and in-memory implementations."""

from omnibase_powerctl.registry.inmemory_node_registry import (
    InMemoryFabricRegistry,
    InMemoryNodeRegistry,
)
from omnibase_powerctl.registry.protocol_node_registry import (
    ProtocolFabricRegistry,
    ProtocolNodeRegistry,
)

__all__: list[str] = [
    "InMemoryFabricRegistry",
    "InMemoryNodeRegistry",
    "ProtocolFabricRegistry",
    "ProtocolNodeRegistry",
]
