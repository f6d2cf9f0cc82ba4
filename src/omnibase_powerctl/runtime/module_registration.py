# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Startup registration payload for the power control module.

Tells the fabric which PhysState transitions this module executes, which
values it may report per attribute path, and which service to start.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from omnibase_powerctl.constants_power_control import (
    FAILURE_STATE,
    PHYS_STATE_URL,
    RUN_STATE_URL,
    SERVICE_NAME,
    SERVICE_STATE_URL,
)
from omnibase_powerctl.enums import EnumPowerState, EnumRunState, EnumServiceState
from omnibase_powerctl.models import (
    ModelDiscoverableValue,
    ModelModuleRegistration,
    ModelMutationDeclaration,
    ModelPhysStateValue,
    ModelPowerControlConfig,
    ModelRunStateValue,
    ModelServiceEntry,
    ModelServiceStateValue,
    ModelTransition,
)
from omnibase_powerctl.registry.protocol_node_registry import ProtocolFabricRegistry
from omnibase_powerctl.runtime.admission_policy import get_admission_policy
from omnibase_powerctl.runtime.transition_table import get_transition_table

logger = logging.getLogger(__name__)

SERVICE_ENTRY_POINT = "omnibase_powerctl.runtime.service_power_control:ServicePowerControl"


def build_discoverables() -> dict[str, list[ModelDiscoverableValue]]:
    """Values this module may report, keyed by attribute path."""
    return {
        PHYS_STATE_URL: [ModelPhysStateValue(value=state) for state in EnumPowerState],
        RUN_STATE_URL: [ModelRunStateValue(value=EnumRunState.UNKNOWN)],
        SERVICE_STATE_URL: [ModelServiceStateValue(value=EnumServiceState.RUN)],
    }


def _declare(
    transition: ModelTransition,
    config: ModelPowerControlConfig,
) -> ModelMutationDeclaration:
    policy = get_admission_policy(transition.name, config)
    return ModelMutationDeclaration(
        name=transition.name,
        url=PHYS_STATE_URL,
        from_value=transition.from_state,
        to_value=transition.to_state,
        requires=dict(policy.requires) if policy else {},
        excludes=dict(policy.excludes) if policy else {},
        timeout_seconds=transition.timeout_seconds,
        failure_module=config.module_name,
        failure_url=PHYS_STATE_URL,
        failure_value=FAILURE_STATE,
    )


def build_module_registration(
    config: ModelPowerControlConfig,
    table: Optional[Mapping[str, ModelTransition]] = None,
) -> ModelModuleRegistration:
    """Assemble the registration payload for ``config``.

    Args:
        config: Runtime configuration (module name, platform predicate)
        table: Transition table to declare; the built-in table when omitted
    """
    transitions = table if table is not None else get_transition_table()
    return ModelModuleRegistration(
        module_name=config.module_name,
        mutations={
            name: _declare(transition, config)
            for name, transition in transitions.items()
        },
        discoverables=build_discoverables(),
        services=[
            ModelServiceEntry(
                service_id=SERVICE_NAME,
                module=config.module_name,
                entry_point=SERVICE_ENTRY_POINT,
            )
        ],
    )


def register_module(
    registry: ProtocolFabricRegistry,
    config: ModelPowerControlConfig,
) -> ModelModuleRegistration:
    """Build the registration payload and publish it to ``registry``."""
    registration = build_module_registration(config)
    registry.register_module(registration)
    logger.debug(
        "module registration published",
        extra={
            "module_name": registration.module_name,
            "mutation_count": len(registration.mutations),
            "phys_state_values": registration.value_ids_for(PHYS_STATE_URL),
        },
    )
    return registration


__all__: list[str] = [
    "SERVICE_ENTRY_POINT",
    "build_discoverables",
    "build_module_registration",
    "register_module",
]
