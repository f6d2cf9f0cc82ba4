# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Models.

Exports:
    ModelAdmissionPolicy: Require/exclude predicates over node attributes
    ModelDiscoverableValue: Tagged union of discoverable value families
    ModelModuleRegistration: Startup registration payload
    ModelMutationDeclaration: Transition as declared to the scheduler
    ModelMutationRequest: Inbound mutation request
    ModelNodeSnapshot: Read-only node attribute snapshot
    ModelObservationEvent: Outbound observed value
    ModelPowerControlConfig: Runtime configuration
    ModelReconcileResult: Discovery sweep counters
    ModelServiceEntry: Service entry declaration
    ModelTransition: Named PhysState transition
"""

from omnibase_powerctl.models.model_admission_policy import ModelAdmissionPolicy
from omnibase_powerctl.models.model_discoverable_value import (
    ModelDiscoverableValue,
    ModelPhysStateValue,
    ModelRunStateValue,
    ModelServiceStateValue,
)
from omnibase_powerctl.models.model_module_registration import (
    ModelModuleRegistration,
    ModelMutationDeclaration,
    ModelServiceEntry,
)
from omnibase_powerctl.models.model_mutation_request import ModelMutationRequest
from omnibase_powerctl.models.model_node_snapshot import ModelNodeSnapshot
from omnibase_powerctl.models.model_observation_event import ModelObservationEvent
from omnibase_powerctl.models.model_power_control_config import (
    ModelPowerControlConfig,
)
from omnibase_powerctl.models.model_reconcile_result import ModelReconcileResult
from omnibase_powerctl.models.model_transition import ModelTransition

__all__: list[str] = [
    "ModelAdmissionPolicy",
    "ModelDiscoverableValue",
    "ModelModuleRegistration",
    "ModelMutationDeclaration",
    "ModelMutationRequest",
    "ModelNodeSnapshot",
    "ModelObservationEvent",
    "ModelPhysStateValue",
    "ModelPowerControlConfig",
    "ModelReconcileResult",
    "ModelRunStateValue",
    "ModelServiceEntry",
    "ModelServiceStateValue",
    "ModelTransition",
]
