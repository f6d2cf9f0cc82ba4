# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Module Registration Models.

The payload published to the fabric at startup: mutation declarations,
discoverable values per attribute path, and the service entry.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.enums import EnumPowerState
from omnibase_powerctl.models.model_discoverable_value import ModelDiscoverableValue


class ModelMutationDeclaration(BaseModel):
    """One transition as declared to the external scheduler.

    Attributes:
        name: Transition name
        url: Attribute path the transition mutates
        from_value: Source value
        to_value: Target value
        requires: Attribute predicates that must match
        excludes: Attribute predicates that must not match
        timeout_seconds: Scheduler deadline
        failure_module: Module owning the failure transition
        failure_url: Attribute path set on failure
        failure_value: Value set on failure
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    url: str
    from_value: EnumPowerState
    to_value: EnumPowerState
    requires: dict[str, str] = Field(default_factory=dict)
    excludes: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float = Field(..., ge=0.0)
    failure_module: str
    failure_url: str
    failure_value: EnumPowerState


class ModelServiceEntry(BaseModel):
    """Named service entry point the fabric starts for this module."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_id: str
    module: str
    entry_point: str


class ModelModuleRegistration(BaseModel):
    """Everything this module publishes to the fabric at startup."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    module_name: str
    mutations: dict[str, ModelMutationDeclaration] = Field(default_factory=dict)
    discoverables: dict[str, list[ModelDiscoverableValue]] = Field(
        default_factory=dict
    )
    services: list[ModelServiceEntry] = Field(default_factory=list)

    def discoverables_for(self, url: str) -> list[ModelDiscoverableValue]:
        """Return the values declared discoverable for ``url`` (empty when undeclared)."""
        return list(self.discoverables.get(url, ()))

    def value_ids_for(self, url: str) -> list[str]:
        return [value.value_id for value in self.discoverables_for(url)]


__all__ = [
    "ModelModuleRegistration",
    "ModelMutationDeclaration",
    "ModelServiceEntry",
]
