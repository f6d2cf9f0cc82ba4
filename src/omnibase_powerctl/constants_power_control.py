# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power control constants.

Attribute paths, service naming and defaults shared by the dispatcher,
reconciler, registration shim and configuration model.
"""

from __future__ import annotations

from typing import Final

from omnibase_powerctl.enums import EnumPowerState
from omnibase_powerctl.utils.util_node_url import url_push

# Attribute paths on a node record
PHYS_STATE_URL: Final[str] = "/PhysState"
RUN_STATE_URL: Final[str] = "/RunState"
PLATFORM_URL: Final[str] = "/Platform"

# Service registration
SERVICE_NAME: Final[str] = "powermancontrol"
SERVICE_STATE_URL: Final[str] = url_push(url_push("/Services", SERVICE_NAME), "State")
MODULE_NAME: Final[str] = "github.com/hpc/kraken/modules/powermancontrol"

# Every transition fails to this PhysState on scheduler timeout
FAILURE_STATE: Final[EnumPowerState] = EnumPowerState.HANG

# Configuration defaults
DEFAULT_PLATFORM: Final[str] = "powerman"
DEFAULT_NAME_URL: Final[str] = "type.googleapis.com/proto.PowermanControl/Name"
DEFAULT_SERVER_URL: Final[str] = "type.googleapis.com/proto.PowermanControl/ApiServer"
DEFAULT_UUID_URL: Final[str] = "type.googleapis.com/proto.PowermanControl/Uuid"
DEFAULT_POWERMAN_COMMAND: Final[str] = "powerman"
DEFAULT_MAX_IN_FLIGHT: Final[int] = 64
DEFAULT_DISCOVERY_INTERVAL_SECONDS: Final[float] = 10.0
DEFAULT_DISCOVERY_QUERY_TIMEOUT_SECONDS: Final[float] = 30.0

__all__: list[str] = [
    "DEFAULT_DISCOVERY_INTERVAL_SECONDS",
    "DEFAULT_DISCOVERY_QUERY_TIMEOUT_SECONDS",
    "DEFAULT_MAX_IN_FLIGHT",
    "DEFAULT_NAME_URL",
    "DEFAULT_PLATFORM",
    "DEFAULT_POWERMAN_COMMAND",
    "DEFAULT_SERVER_URL",
    "DEFAULT_UUID_URL",
    "FAILURE_STATE",
    "MODULE_NAME",
    "PHYS_STATE_URL",
    "PLATFORM_URL",
    "RUN_STATE_URL",
    "SERVICE_NAME",
    "SERVICE_STATE_URL",
]
