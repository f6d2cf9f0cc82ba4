# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the in-memory fabric registries."""

from __future__ import annotations

import pytest

from omnibase_powerctl.registry import (
    InMemoryFabricRegistry,
    InMemoryNodeRegistry,
    ProtocolFabricRegistry,
    ProtocolNodeRegistry,
)
from tests.helpers.power_stubs import make_node


class TestInMemoryNodeRegistry:
    @pytest.mark.asyncio
    async def test_query_read_all_in_insertion_order(self) -> None:
        registry = InMemoryNodeRegistry([make_node("b", "node02"), make_node("a", "node01")])

        nodes = await registry.query_read_all()

        assert [n.node_id for n in nodes] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_upsert_replaces_record(self) -> None:
        registry = InMemoryNodeRegistry([make_node("a", "node01")])
        registry.upsert(make_node("a", "node09"))

        assert len(registry) == 1
        node = registry.get("a")
        assert node is not None
        assert node.get_values(["type.googleapis.com/proto.PowermanControl/Name"]) == {
            "type.googleapis.com/proto.PowermanControl/Name": "node09"
        }

    def test_remove(self) -> None:
        registry = InMemoryNodeRegistry([make_node("a", "node01")])

        assert registry.remove("a") is True
        assert registry.remove("a") is False
        assert registry.get("a") is None

    def test_satisfies_protocols(self) -> None:
        assert isinstance(InMemoryNodeRegistry(), ProtocolNodeRegistry)
        assert isinstance(InMemoryFabricRegistry(), ProtocolFabricRegistry)
