# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Event bus used to exchange mutation and observation events locally."""

from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.models import ModelEventHeaders, ModelEventMessage

__all__: list[str] = ["InMemoryEventBus", "ModelEventHeaders", "ModelEventMessage"]
