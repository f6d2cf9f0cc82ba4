# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Error Context Configuration Model.

This module defines the configuration model for infrastructure error context,
encapsulating common structured fields to reduce __init__ parameter count
while keeping them strongly typed.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from omnibase_powerctl.enums import EnumInfraTransportType


class ModelInfraErrorContext(BaseModel):
    """Configuration model for infrastructure error context.

    Attributes:
        transport_type: Type of infrastructure transport (PROCESS, EVENT_BUS, etc.)
        operation: Operation being performed (power_on, query_state, etc.)
        target_name: Target node, endpoint or resource name
        correlation_id: Request correlation ID for distributed tracing

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.PROCESS,
        ...     operation="power_on",
        ...     target_name="node01",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise BackendInvocationError("powerman failed", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transport_type: Optional[EnumInfraTransportType] = Field(
        default=None,
        description="Type of infrastructure transport (PROCESS, EVENT_BUS, REGISTRY, RUNTIME)",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed (power_on, power_off, query_state, etc.)",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target node, endpoint or resource name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Request correlation ID for distributed tracing",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: Optional[UUID] = None,
        **kwargs: object,
    ) -> ModelInfraErrorContext:
        """Create a context, generating a correlation ID when none is given."""
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)  # type: ignore[arg-type]


__all__ = ["ModelInfraErrorContext"]
