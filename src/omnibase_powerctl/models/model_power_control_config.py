# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Configuration Model.

Structured configuration supplied by the host. Loaded from YAML by
``omnibase_powerctl.runtime.kernel.load_power_control_config`` or built
directly by an embedding process.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from omnibase_powerctl.constants_power_control import (
    DEFAULT_DISCOVERY_INTERVAL_SECONDS,
    DEFAULT_DISCOVERY_QUERY_TIMEOUT_SECONDS,
    DEFAULT_MAX_IN_FLIGHT,
    DEFAULT_NAME_URL,
    DEFAULT_PLATFORM,
    DEFAULT_POWERMAN_COMMAND,
    DEFAULT_SERVER_URL,
    DEFAULT_UUID_URL,
    MODULE_NAME,
    PLATFORM_URL,
)


class ModelPowerControlConfig(BaseModel):
    """Runtime configuration for the power controller.

    Attributes:
        node_names: Allow-list of node names this module may control
        platform: Platform string a node's platform attribute must equal
        platform_url: Attribute path of the platform tag
        name_url: Attribute path of the node name known to powerman
        server_url: Attribute path of the powerman server endpoint
        uuid_url: Attribute path of the node UUID (informational)
        module_name: Producer ID stamped on observation events
        self_node_id: Node ID of the host running this module
        max_in_flight: Cap on concurrently running backend calls
        discovery_interval_seconds: Period of the discovery sweep (0 disables)
        discovery_query_timeout_seconds: Deadline for one discovery query
        powerman_command: Executable used for the powerman client

    Example:
        >>> config = ModelPowerControlConfig(node_names=["node01", "node02"])
        >>> config.is_allowed("node01")
        True
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    node_names: list[str] = Field(
        default_factory=list,
        description="Ordered allow-list of node names under control",
    )
    platform: str = Field(default=DEFAULT_PLATFORM, min_length=1)
    platform_url: str = Field(default=PLATFORM_URL, min_length=1)
    name_url: str = Field(default=DEFAULT_NAME_URL, min_length=1)
    server_url: str = Field(default=DEFAULT_SERVER_URL, min_length=1)
    uuid_url: str = Field(default=DEFAULT_UUID_URL, min_length=1)
    module_name: str = Field(default=MODULE_NAME, min_length=1)
    self_node_id: str = Field(default="self", min_length=1)
    max_in_flight: int = Field(default=DEFAULT_MAX_IN_FLIGHT, ge=1, le=4096)
    discovery_interval_seconds: float = Field(
        default=DEFAULT_DISCOVERY_INTERVAL_SECONDS,
        ge=0.0,
        description="Seconds between discovery sweeps; 0 disables the timer",
    )
    discovery_query_timeout_seconds: float = Field(
        default=DEFAULT_DISCOVERY_QUERY_TIMEOUT_SECONDS,
        gt=0.0,
    )
    powerman_command: str = Field(default=DEFAULT_POWERMAN_COMMAND, min_length=1)

    @field_validator("node_names")
    @classmethod
    def _strip_node_names(cls, value: list[str]) -> list[str]:
        return [name.strip() for name in value if name.strip()]

    def is_allowed(self, name: str) -> bool:
        """Return True when ``name`` is on the allow-list."""
        return name in self.node_names


__all__ = ["ModelPowerControlConfig"]
