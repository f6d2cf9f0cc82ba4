# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Node Run State Enumeration.

The controller never drives RunState; it only declares UNKNOWN as a
discoverable value so the fabric can seed the attribute.
"""

from enum import Enum


class EnumRunState(str, Enum):
    """Run state values this module may report."""

    UNKNOWN = "UNKNOWN"


__all__ = ["EnumRunState"]
