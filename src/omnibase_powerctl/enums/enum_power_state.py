# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Physical Power State Enumeration.

Defines the PhysState values tracked per node. The enum value is the
``value_id`` carried on the wire by observation events.
"""

from enum import Enum


class EnumPowerState(str, Enum):
    """Physical power condition of a node as last observed or desired.

    Attributes:
        UNKNOWN: Power state has not been observed yet
        OFF: Node is powered off
        ON: Node is powered on
        HANG: Node is hung; failure sink for every power transition
    """

    UNKNOWN = "UNKNOWN"
    OFF = "OFF"
    ON = "ON"
    HANG = "HANG"


__all__ = ["EnumPowerState"]
