# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Enumerations Module.

Exports:
    EnumErrorCode: Error classification codes for PowerControlError
    EnumInfraTransportType: Transport type enumeration for error context
    EnumMutationType: Mutation request kind (MUTATE, INTERRUPT)
    EnumPowerState: Physical power state (UNKNOWN, OFF, ON, HANG)
    EnumRunState: Run state values declared as discoverable
    EnumServiceState: Service liveness token (RUN)
"""

from omnibase_powerctl.enums.enum_error_code import EnumErrorCode
from omnibase_powerctl.enums.enum_infra_transport_type import EnumInfraTransportType
from omnibase_powerctl.enums.enum_mutation_type import EnumMutationType
from omnibase_powerctl.enums.enum_power_state import EnumPowerState
from omnibase_powerctl.enums.enum_run_state import EnumRunState
from omnibase_powerctl.enums.enum_service_state import EnumServiceState

__all__: list[str] = [
    "EnumErrorCode",
    "EnumInfraTransportType",
    "EnumMutationType",
    "EnumPowerState",
    "EnumRunState",
    "EnumServiceState",
]
