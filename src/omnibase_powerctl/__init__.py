# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""ONEX Power Control - node power-lifecycle controller.

This package reconciles the desired physical power state of managed compute
nodes against their actual state using the ``powerman`` out-of-band client:

- Transition table and admission policy for PhysState mutations
- Mutation dispatcher executing power on/off through a power backend
- Discovery reconciler polling real power state for every known node
- Module registration payload and service entry point for the fleet fabric

Key Components:
    - MutationDispatcher: event-driven execution of power transitions
    - DiscoveryReconciler: periodic power-state sweep
    - HandlerPowerman: subprocess adapter for the powerman client
    - ServicePowerControl: the module's main loop
"""

__all__: list[str] = []
