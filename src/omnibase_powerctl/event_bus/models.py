# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Event bus message models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ModelEventHeaders(BaseModel):
    """Metadata attached to every event bus message.

    Attributes:
        source: Producer identifier (``<environment>.<group>`` by default)
        event_type: Event type, normally the topic name
        content_type: Payload media type
        correlation_id: Correlation ID for tracing
        timestamp: Creation time (UTC)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: str
    event_type: str
    content_type: str = "application/octet-stream"
    correlation_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ModelEventMessage(BaseModel):
    """A message delivered to event bus subscribers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    topic: str
    key: Optional[bytes] = None
    value: bytes
    headers: ModelEventHeaders
    offset: str
    partition: int = 0


__all__: list[str] = ["ModelEventHeaders", "ModelEventMessage"]
