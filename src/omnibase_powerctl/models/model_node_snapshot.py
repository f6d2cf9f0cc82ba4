# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Node Snapshot Model.

A read-only view of one node record owned by the fabric's node registry.
Attributes are addressed by path (``/Platform``, the configured name URL,
the configured server URL, ...). The controller reads a fresh snapshot per
operation and never caches it across calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ModelNodeSnapshot(BaseModel):
    """Attribute snapshot of a managed node.

    Attributes:
        node_id: Opaque node identifier assigned by the fabric
        values: Attribute path -> string value

    Example:
        >>> node = ModelNodeSnapshot(
        ...     node_id="123e4567-e89b-12d3-a456-426614174000",
        ...     values={"/Platform": "powerman", "/Name": "node01"},
        ... )
        >>> node.get_value("/Platform")
        'powerman'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    node_id: str = Field(
        ...,
        min_length=1,
        description="Opaque node identifier assigned by the fabric",
    )
    values: dict[str, str] = Field(
        default_factory=dict,
        description="Attribute values addressed by path",
    )

    def get_value(self, path: str) -> Optional[str]:
        """Return the attribute at ``path``, or None when unset or empty."""
        value = self.values.get(path)
        if not value:
            return None
        return value

    def get_values(self, paths: Iterable[str]) -> dict[str, str]:
        """Return the subset of ``paths`` that carry a non-empty value.

        Callers detect missing attributes by comparing the result length
        with the number of requested paths.
        """
        found: dict[str, str] = {}
        for path in paths:
            value = self.get_value(path)
            if value is not None:
                found[path] = value
        return found


__all__ = ["ModelNodeSnapshot"]
