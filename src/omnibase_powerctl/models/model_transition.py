# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power State Transition Model."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator

from omnibase_powerctl.enums import EnumPowerState


class ModelTransition(BaseModel):
    """A named, directed PhysState transition with a scheduler deadline.

    The deadline is enforced by the external scheduler, which routes the
    node to the failure state when no observation arrives in time.

    Attributes:
        name: Unique transition name (e.g. ``OFFtoON``)
        from_state: PhysState the node must be in
        to_state: PhysState the node ends in
        timeout_seconds: Scheduler deadline for the transition
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    name: str = Field(..., min_length=1, description="Unique transition name")
    from_state: EnumPowerState = Field(..., description="Source PhysState")
    to_state: EnumPowerState = Field(..., description="Target PhysState")
    timeout_seconds: float = Field(
        ...,
        ge=0.0,
        description="Deadline declared to the scheduler, in seconds",
    )

    @model_validator(mode="after")
    def _check_distinct_states(self) -> ModelTransition:
        if self.from_state == self.to_state:
            raise ValueError(
                f"transition '{self.name}' must change state, got "
                f"{self.from_state.value} -> {self.to_state.value}"
            )
        return self

    @property
    def timeout(self) -> timedelta:
        """Deadline as a timedelta."""
        return timedelta(seconds=self.timeout_seconds)


__all__ = ["ModelTransition"]
