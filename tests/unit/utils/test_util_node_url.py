# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for node URL helpers."""

from __future__ import annotations

from omnibase_powerctl.utils import node_url_join, node_url_split, url_push


def test_join() -> None:
    assert node_url_join("abc", "/PhysState") == "abc:/PhysState"


def test_split_keeps_colons_in_url() -> None:
    node_url = node_url_join("abc", "type.googleapis.com/proto.PowermanControl/Name")
    assert node_url_split(node_url) == (
        "abc",
        "type.googleapis.com/proto.PowermanControl/Name",
    )


def test_split_bare_path() -> None:
    assert node_url_split("/RunState") == ("", "/RunState")


def test_url_push() -> None:
    assert url_push("/Services/", "/powermancontrol") == "/Services/powermancontrol"
    assert url_push(url_push("/Services", "powermancontrol"), "State") == (
        "/Services/powermancontrol/State"
    )
