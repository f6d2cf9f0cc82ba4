# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Discovery Sweep Result Model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelReconcileResult(BaseModel):
    """Counters describing one discovery sweep."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    nodes_seen: int = Field(default=0, ge=0)
    nodes_admitted: int = Field(default=0, ge=0)
    endpoints: int = Field(default=0, ge=0)
    observations_emitted: int = Field(default=0, ge=0)
    query_failures: int = Field(default=0, ge=0)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    registry_failed: bool = False


__all__ = ["ModelReconcileResult"]
