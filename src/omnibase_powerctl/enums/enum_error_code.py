# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Error Code Enumeration.

Error codes classify every PowerControlError so callers and log pipelines
can branch on the failure category without string matching.
"""

from enum import Enum


class EnumErrorCode(str, Enum):
    """Error classification codes for power control errors.

    Attributes:
        OPERATION_FAILED: Generic failure of an operation
        INVALID_CONFIGURATION: Configuration or transition table is invalid
        PERMISSION_DENIED: Node is not admissible for control
        RESOURCE_NOT_FOUND: Required node attribute is missing
        BACKEND_FAILURE: Power backend command failed
        PARSING_ERROR: Backend output could not be interpreted
        INVALID_INPUT: Inbound event is malformed
        SERVICE_UNAVAILABLE: Dependency not started or not reachable
    """

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    BACKEND_FAILURE = "BACKEND_FAILURE"
    PARSING_ERROR = "PARSING_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


__all__ = ["EnumErrorCode"]
