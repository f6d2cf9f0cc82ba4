# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""PhysState transition table.

The static set of named, directed power-state transitions this module
offers to the fabric scheduler. Every transition declares HANG as its
failure target; the scheduler, not this module, applies that fallback when a
transition's deadline passes without an observation.

    UNKNOWN --UKtoOFF--> OFF --OFFtoON--> ON
       |                  ^                |
       |                  +----ONtoOFF-----+
       +--UKtoHANG--> HANG --HANGtoOFF--> OFF

``UKtoHANG`` is never executed; it only connects HANG into the graph.
``HANGtoOFF`` gets a longer deadline because a hung node is left to sit
cold before its power-off is trusted.

The table is validated and frozen at import time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final, Optional

from omnibase_powerctl.enums import EnumInfraTransportType, EnumPowerState
from omnibase_powerctl.errors import ModelInfraErrorContext, ProtocolConfigurationError
from omnibase_powerctl.models import ModelTransition

TRANSITION_UK_TO_OFF: Final[str] = "UKtoOFF"
TRANSITION_OFF_TO_ON: Final[str] = "OFFtoON"
TRANSITION_ON_TO_OFF: Final[str] = "ONtoOFF"
TRANSITION_HANG_TO_OFF: Final[str] = "HANGtoOFF"
TRANSITION_UK_TO_HANG: Final[str] = "UKtoHANG"

_TRANSITIONS: Final[tuple[ModelTransition, ...]] = (
    ModelTransition(
        name=TRANSITION_UK_TO_OFF,
        from_state=EnumPowerState.UNKNOWN,
        to_state=EnumPowerState.OFF,
        timeout_seconds=10.0,
    ),
    ModelTransition(
        name=TRANSITION_OFF_TO_ON,
        from_state=EnumPowerState.OFF,
        to_state=EnumPowerState.ON,
        timeout_seconds=10.0,
    ),
    ModelTransition(
        name=TRANSITION_ON_TO_OFF,
        from_state=EnumPowerState.ON,
        to_state=EnumPowerState.OFF,
        timeout_seconds=10.0,
    ),
    ModelTransition(
        name=TRANSITION_HANG_TO_OFF,
        from_state=EnumPowerState.HANG,
        to_state=EnumPowerState.OFF,
        timeout_seconds=20.0,
    ),
    ModelTransition(
        name=TRANSITION_UK_TO_HANG,
        from_state=EnumPowerState.UNKNOWN,
        to_state=EnumPowerState.HANG,
        timeout_seconds=0.0,
    ),
)


def reachable_states(
    transitions: Iterable[ModelTransition],
    start: EnumPowerState = EnumPowerState.UNKNOWN,
) -> frozenset[EnumPowerState]:
    """Return every state reachable from ``start`` (including ``start``)."""
    edges: dict[EnumPowerState, set[EnumPowerState]] = {}
    for transition in transitions:
        edges.setdefault(transition.from_state, set()).add(transition.to_state)

    seen = {start}
    frontier = [start]
    while frontier:
        state = frontier.pop()
        for nxt in edges.get(state, ()):
            if nxt not in seen:
                seen.add(nxt)
                frontier.append(nxt)
    return frozenset(seen)


def validate_transition_table(transitions: Iterable[ModelTransition]) -> None:
    """Check the structural invariants of a transition table.

    Raises:
        ProtocolConfigurationError: If a name is duplicated, a transition
            does not change state, a source state cannot be entered, or the
            graph does not reach every PowerState from UNKNOWN.
    """
    transitions = list(transitions)
    context = ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.RUNTIME,
        operation="validate_transition_table",
    )

    names: set[str] = set()
    for transition in transitions:
        if transition.name in names:
            raise ProtocolConfigurationError(
                f"Duplicate transition name '{transition.name}'",
                context=context,
            )
        names.add(transition.name)
        if transition.from_state == transition.to_state:
            raise ProtocolConfigurationError(
                f"Transition '{transition.name}' does not change state",
                context=context,
            )

    enterable = {t.to_state for t in transitions} | {EnumPowerState.UNKNOWN}
    for transition in transitions:
        if transition.from_state not in enterable:
            raise ProtocolConfigurationError(
                f"Transition '{transition.name}' starts from "
                f"{transition.from_state.value}, which no transition enters",
                context=context,
            )

    missing = set(EnumPowerState) - reachable_states(transitions)
    if missing:
        raise ProtocolConfigurationError(
            "Transition graph does not reach "
            + ", ".join(sorted(state.value for state in missing))
            + " from UNKNOWN",
            context=context,
        )


def build_transition_table(
    transitions: Iterable[ModelTransition],
) -> Mapping[str, ModelTransition]:
    """Validate ``transitions`` and return a read-only name -> transition map."""
    transitions = list(transitions)
    validate_transition_table(transitions)
    return MappingProxyType({t.name: t for t in transitions})


TRANSITION_TABLE: Final[Mapping[str, ModelTransition]] = build_transition_table(
    _TRANSITIONS
)


def get_transition_table() -> Mapping[str, ModelTransition]:
    """Return the module's read-only transition table."""
    return TRANSITION_TABLE


def get_transition(name: str) -> Optional[ModelTransition]:
    """Look up a transition by name."""
    return TRANSITION_TABLE.get(name)


__all__: list[str] = [
    "TRANSITION_HANG_TO_OFF",
    "TRANSITION_OFF_TO_ON",
    "TRANSITION_ON_TO_OFF",
    "TRANSITION_TABLE",
    "TRANSITION_UK_TO_HANG",
    "TRANSITION_UK_TO_OFF",
    "build_transition_table",
    "get_transition",
    "get_transition_table",
    "reachable_states",
    "validate_transition_table",
]
