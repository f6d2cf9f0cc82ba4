# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Admission Policy Model.

Require/exclude predicates over node attributes that gate whether a
transition applies to a node.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.models.model_node_snapshot import ModelNodeSnapshot


class ModelAdmissionPolicy(BaseModel):
    """Require/exclude predicates for transition applicability.

    A transition is applicable to a node iff every ``requires`` attribute is
    present with the required value and no ``excludes`` attribute matches.

    Attributes:
        requires: Attribute path -> required value
        excludes: Attribute path -> excluded value
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    requires: dict[str, str] = Field(
        default_factory=dict,
        description="Attribute path -> value that must match",
    )
    excludes: dict[str, str] = Field(
        default_factory=dict,
        description="Attribute path -> value that must not match",
    )

    def is_applicable(self, node: ModelNodeSnapshot) -> bool:
        """Return True when ``node`` satisfies every predicate."""
        for path, required in self.requires.items():
            if node.get_value(path) != required:
                return False
        for path, excluded in self.excludes.items():
            if node.get_value(path) == excluded:
                return False
        return True


__all__ = ["ModelAdmissionPolicy"]
