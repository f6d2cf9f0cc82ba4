# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility helpers for the power controller."""

from omnibase_powerctl.utils.correlation import generate_correlation_id
from omnibase_powerctl.utils.util_node_url import (
    node_url_join,
    node_url_split,
    url_push,
)

__all__: list[str] = [
    "generate_correlation_id",
    "node_url_join",
    "node_url_split",
    "url_push",
]
