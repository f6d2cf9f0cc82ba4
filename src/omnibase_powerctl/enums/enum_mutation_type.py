# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Mutation Request Type Enumeration."""

from enum import Enum


class EnumMutationType(str, Enum):
    """Kind of mutation request delivered by the fabric scheduler.

    Attributes:
        MUTATE: Execute the named transition
        INTERRUPT: The scheduler abandoned the transition; nothing to undo
    """

    MUTATE = "MUTATE"
    INTERRUPT = "INTERRUPT"


__all__ = ["EnumMutationType"]
