# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Discoverable Value Models.

A discriminated union over the value families this module reports. The
fabric learns from the registration payload which values each attribute
path may take.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.enums import EnumPowerState, EnumRunState, EnumServiceState


class ModelPhysStateValue(BaseModel):
    """A PhysState value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["phys_state"] = "phys_state"
    value: EnumPowerState

    @property
    def value_id(self) -> str:
        return self.value.value


class ModelRunStateValue(BaseModel):
    """A RunState value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["run_state"] = "run_state"
    value: EnumRunState

    @property
    def value_id(self) -> str:
        return self.value.value


class ModelServiceStateValue(BaseModel):
    """A service liveness value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["service_state"] = "service_state"
    value: EnumServiceState

    @property
    def value_id(self) -> str:
        return self.value.value


ModelDiscoverableValue = Annotated[
    Union[ModelPhysStateValue, ModelRunStateValue, ModelServiceStateValue],
    Field(discriminator="kind"),
]


__all__ = [
    "ModelDiscoverableValue",
    "ModelPhysStateValue",
    "ModelRunStateValue",
    "ModelServiceStateValue",
]
