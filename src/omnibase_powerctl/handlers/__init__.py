# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power backend handlers.

Exports:
    ProtocolPowerBackend: Interface required by dispatcher and reconciler
    HandlerPowerman: powerman client subprocess adapter
    HandlerSimulatedPower: In-memory backend for local runs
    parse_query_output: Map powerman query output to a power state
"""

from omnibase_powerctl.handlers.handler_powerman import (
    HandlerPowerman,
    expand_hostlist,
    parse_query_output,
)
from omnibase_powerctl.handlers.handler_simulated_power import HandlerSimulatedPower
from omnibase_powerctl.handlers.protocol_power_backend import ProtocolPowerBackend

__all__: list[str] = [
    "HandlerPowerman",
    "HandlerSimulatedPower",
    "ProtocolPowerBackend",
    "expand_hostlist",
    "parse_query_output",
]
