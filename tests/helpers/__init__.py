# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for omnibase_powerctl unit tests.

Available Utilities:
    Power stubs:
        - StubPowerBackend: Scriptable backend with per-node delay and failure
        - CollectingObservationSink: Sink that records every emitted event
        - make_node: Build a node snapshot with the default attribute paths
"""

from tests.helpers.power_stubs import (
    CollectingObservationSink,
    StubPowerBackend,
    make_node,
)

__all__ = [
    "CollectingObservationSink",
    "StubPowerBackend",
    "make_node",
]
