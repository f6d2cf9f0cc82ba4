# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Error Classes.

Error Hierarchy:
    PowerControlError (base error, carries structured context)
    ├── ProtocolConfigurationError
    ├── InfraUnavailableError
    ├── AdmissionError
    ├── AttributeResolutionError
    ├── EventProtocolError
    └── BackendInvocationError
        └── DiscoveryParseError

All errors:
    - Use EnumErrorCode for error classification
    - Support proper error chaining with ``raise ... from e``
    - Include structured context for debugging
    - Support correlation IDs for request tracking
    - Accept ModelInfraErrorContext for bundled context parameters

None of these errors is fatal to the controller process. The dispatcher and
reconciler catch them per node, log them, and keep running.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from omnibase_powerctl.enums import EnumErrorCode
from omnibase_powerctl.errors.model_infra_error_context import ModelInfraErrorContext


class PowerControlError(Exception):
    """Base error class for power control errors.

    Structured Fields (via ModelInfraErrorContext):
        transport_type: Type of transport (process, event_bus, registry, runtime)
        operation: Operation being performed
        correlation_id: Request correlation ID for tracking
        target_name: Target node or endpoint name

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.PROCESS,
        ...     operation="power_off",
        ...     target_name="node07",
        ... )
        >>> raise PowerControlError("Operation failed", context=context, exit_code=1)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumErrorCode] = None,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize PowerControlError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled infrastructure context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumErrorCode.OPERATION_FAILED
        self.correlation_id: Optional[UUID] = None

        structured_context: dict[str, object] = dict(extra_context)
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id
        self.context = structured_context

    def __str__(self) -> str:
        if self.correlation_id is not None:
            return f"{self.message} (correlation_id: {self.correlation_id})"
        return self.message


class ProtocolConfigurationError(PowerControlError):
    """Raised when configuration or the transition table fails validation.

    Example:
        >>> raise ProtocolConfigurationError(
        ...     "Transition 'OFFtoOFF' has identical from/to states",
        ...     context=context,
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class InfraUnavailableError(PowerControlError):
    """Raised when a runtime dependency is used before it is started."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumErrorCode.SERVICE_UNAVAILABLE,
            context=context,
            **extra_context,
        )


class AdmissionError(PowerControlError):
    """Raised when a node may not be controlled by this module.

    Covers both a node missing from the configured allow-list and a node
    failing the admission policy (platform predicate).
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumErrorCode.PERMISSION_DENIED,
            context=context,
            **extra_context,
        )


class AttributeResolutionError(PowerControlError):
    """Raised when required node attributes are missing from a snapshot."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumErrorCode.RESOURCE_NOT_FOUND,
            context=context,
            **extra_context,
        )


class EventProtocolError(PowerControlError):
    """Raised when an inbound event is not a well-formed mutation request."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumErrorCode.INVALID_INPUT,
            context=context,
            **extra_context,
        )


class BackendInvocationError(PowerControlError):
    """Raised when a power backend command cannot be run or fails.

    Example:
        >>> raise BackendInvocationError(
        ...     "powerman -1 node01 exited with status 1",
        ...     context=context,
        ...     exit_code=1,
        ...     stderr="Command completed with errors",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        error_code: Optional[EnumErrorCode] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or EnumErrorCode.BACKEND_FAILURE,
            context=context,
            **extra_context,
        )


class DiscoveryParseError(BackendInvocationError):
    """Raised when power query output cannot be mapped to a PowerState.

    The query output must be exactly three lines (on, off, unknown) and the
    node must appear in one of them; anything else is this error rather
    than a silent UNKNOWN.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            error_code=EnumErrorCode.PARSING_ERROR,
            **extra_context,
        )


__all__ = [
    "AdmissionError",
    "AttributeResolutionError",
    "BackendInvocationError",
    "DiscoveryParseError",
    "EventProtocolError",
    "InfraUnavailableError",
    "PowerControlError",
    "ProtocolConfigurationError",
]
