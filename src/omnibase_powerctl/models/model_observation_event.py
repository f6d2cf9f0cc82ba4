# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Observation Event Model.

Outbound record reporting the observed value of a node attribute.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.utils.util_node_url import node_url_join


class ModelObservationEvent(BaseModel):
    """Observed attribute value emitted to the fabric.

    Attributes:
        target_path: ``<node-id>:<attribute-path>`` of the observed attribute
        producer_id: Name of the emitting module
        value_id: Observed value token (PowerState name or service token)
        correlation_id: Correlation ID of the mutation that caused it, if any
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    target_path: str = Field(..., min_length=1, description="Observed attribute URL")
    producer_id: str = Field(..., min_length=1, description="Emitting module name")
    value_id: str = Field(..., min_length=1, description="Observed value token")
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Correlation ID of the originating request",
    )

    @classmethod
    def for_node(
        cls,
        node_id: str,
        url: str,
        producer_id: str,
        value_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> ModelObservationEvent:
        """Build an observation for ``url`` on node ``node_id``."""
        return cls(
            target_path=node_url_join(node_id, url),
            producer_id=producer_id,
            value_id=value_id,
            correlation_id=correlation_id,
        )


__all__ = ["ModelObservationEvent"]
