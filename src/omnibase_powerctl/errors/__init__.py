# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Errors Module.

Exports:
    ModelInfraErrorContext: Configuration model for bundled error context
    PowerControlError: Base error class
    ProtocolConfigurationError: Configuration and transition table validation errors
    InfraUnavailableError: Dependency used before start
    AdmissionError: Node not on the allow-list or failing the admission policy
    AttributeResolutionError: Required node attributes missing
    EventProtocolError: Malformed inbound event
    BackendInvocationError: Power backend command failure
    DiscoveryParseError: Unparseable power query output

Correlation ID Assignment:
    - Propagate correlation_id from the inbound mutation request
    - If none exists, generate one with uuid4()

    Example::

        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.PROCESS,
            operation="power_on",
            target_name=name,
            correlation_id=request.correlation_id,
        )
        raise BackendInvocationError("powerman failed", context=context) from e
"""

from omnibase_powerctl.errors.infra_errors import (
    AdmissionError,
    AttributeResolutionError,
    BackendInvocationError,
    DiscoveryParseError,
    EventProtocolError,
    InfraUnavailableError,
    PowerControlError,
    ProtocolConfigurationError,
)
from omnibase_powerctl.errors.model_infra_error_context import ModelInfraErrorContext

__all__: list[str] = [
    "AdmissionError",
    "AttributeResolutionError",
    "BackendInvocationError",
    "DiscoveryParseError",
    "EventProtocolError",
    "InfraUnavailableError",
    "ModelInfraErrorContext",
    "PowerControlError",
    "ProtocolConfigurationError",
]
