# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Mutation Request Model.

Inbound record delivered by the fabric scheduler on the mutation topic.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.enums import EnumMutationType
from omnibase_powerctl.models.model_node_snapshot import ModelNodeSnapshot


class ModelMutationRequest(BaseModel):
    """Request to execute (or interrupt) a named transition on a node.

    Attributes:
        transition_name: Name of the transition in the transition table
        node: Snapshot of the node the transition applies to
        mutation_type: MUTATE or INTERRUPT
        correlation_id: Correlation ID propagated into logs and errors
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transition_name: str = Field(..., description="Transition to execute")
    node: ModelNodeSnapshot = Field(..., description="Target node snapshot")
    mutation_type: EnumMutationType = Field(
        default=EnumMutationType.MUTATE,
        description="Mutation kind",
    )
    correlation_id: UUID = Field(
        default_factory=uuid4,
        description="Request correlation ID for distributed tracing",
    )


__all__ = ["ModelMutationRequest"]
