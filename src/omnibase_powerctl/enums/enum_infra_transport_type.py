# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Transport Type Enumeration.

Defines the transport types the power controller talks through.
Used for error context and transport identification.
"""

from enum import Enum


class EnumInfraTransportType(str, Enum):
    """Infrastructure transport types for the power controller.

    Attributes:
        PROCESS: External command invocation (the powerman client)
        EVENT_BUS: Fabric event stream (mutations in, observations out)
        REGISTRY: Fabric node registry queries and module registration
        RUNTIME: Runtime host process internal transport
    """

    PROCESS = "process"
    EVENT_BUS = "event_bus"
    REGISTRY = "registry"
    RUNTIME = "runtime"


__all__ = ["EnumInfraTransportType"]
