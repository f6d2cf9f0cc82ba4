# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Topic naming constants for the power controller event streams.

Mutation requests arrive on ``MUTATION_TOPIC``; observation events leave on
``DISCOVERY_TOPIC``. Event types mirror the topic names so a consumer can
reject a message whose type does not match the stream it came from.
"""

from __future__ import annotations

from typing import Final

MUTATION_TOPIC: Final[str] = "mutation"
DISCOVERY_TOPIC: Final[str] = "discovery"

EVENT_TYPE_STATE_MUTATION: Final[str] = "state_mutation"
EVENT_TYPE_DISCOVERY: Final[str] = "discovery"

CONTENT_TYPE_JSON: Final[str] = "application/json"

__all__: list[str] = [
    "CONTENT_TYPE_JSON",
    "DISCOVERY_TOPIC",
    "EVENT_TYPE_DISCOVERY",
    "EVENT_TYPE_STATE_MUTATION",
    "MUTATION_TOPIC",
]
