# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Service Liveness State Enumeration."""

from enum import Enum


class EnumServiceState(str, Enum):
    """Liveness token reported on the module's service-state path."""

    RUN = "RUN"


__all__ = ["EnumServiceState"]
