# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime module for omnibase_powerctl.

Core Components
---------------
- **Transition table**: the five PhysState transitions and their deadlines
- **Admission policy**: platform predicate and allow-list checks
- **MutationDispatcher**: executes transitions through a power backend
- **DiscoveryReconciler**: periodic sweep reporting actual power state
- **ServicePowerControl**: long-running service loop fed by the event bus
- **Module registration**: startup payload published to the fabric

The kernel (``omnibase_powerctl.runtime.kernel``) is not imported here; it
wires concrete backends and is loaded by the CLI on demand.
"""

from omnibase_powerctl.runtime.admission_policy import (
    build_admission_policy,
    check_admission,
    get_admission_policy,
    resolve_power_attributes,
)
from omnibase_powerctl.runtime.discovery_reconciler import DiscoveryReconciler
from omnibase_powerctl.runtime.module_registration import (
    build_discoverables,
    build_module_registration,
    register_module,
)
from omnibase_powerctl.runtime.mutation_dispatcher import MutationDispatcher
from omnibase_powerctl.runtime.observation_sink import (
    EventBusObservationSink,
    ProtocolObservationSink,
    QueueObservationSink,
)
from omnibase_powerctl.runtime.service_power_control import (
    ServicePowerControl,
    decode_mutation_message,
)
from omnibase_powerctl.runtime.transition_table import (
    TRANSITION_HANG_TO_OFF,
    TRANSITION_OFF_TO_ON,
    TRANSITION_ON_TO_OFF,
    TRANSITION_TABLE,
    TRANSITION_UK_TO_HANG,
    TRANSITION_UK_TO_OFF,
    build_transition_table,
    get_transition,
    get_transition_table,
    reachable_states,
    validate_transition_table,
)

__all__: list[str] = [
    "TRANSITION_HANG_TO_OFF",
    "TRANSITION_OFF_TO_ON",
    "TRANSITION_ON_TO_OFF",
    "TRANSITION_TABLE",
    "TRANSITION_UK_TO_HANG",
    "TRANSITION_UK_TO_OFF",
    "DiscoveryReconciler",
    "EventBusObservationSink",
    "MutationDispatcher",
    "ProtocolObservationSink",
    "QueueObservationSink",
    "ServicePowerControl",
    "build_admission_policy",
    "build_discoverables",
    "build_module_registration",
    "build_transition_table",
    "check_admission",
    "decode_mutation_message",
    "get_admission_policy",
    "get_transition",
    "get_transition_table",
    "reachable_states",
    "register_module",
    "resolve_power_attributes",
    "validate_transition_table",
]
