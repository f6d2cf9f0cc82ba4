# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Admission policy and allow-list checks.

One policy is shared by every transition: the node's platform attribute must
equal the configured platform string. It is looked up per transition so a
later version can vary it without touching callers.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from omnibase_powerctl.enums import EnumInfraTransportType
from omnibase_powerctl.errors import (
    AdmissionError,
    AttributeResolutionError,
    ModelInfraErrorContext,
)
from omnibase_powerctl.models import (
    ModelAdmissionPolicy,
    ModelNodeSnapshot,
    ModelPowerControlConfig,
)
from omnibase_powerctl.runtime.transition_table import get_transition


def build_admission_policy(config: ModelPowerControlConfig) -> ModelAdmissionPolicy:
    """Build the shared policy: ``requires = {platform_url: platform}``."""
    return ModelAdmissionPolicy(
        requires={config.platform_url: config.platform},
        excludes={},
    )


def get_admission_policy(
    transition_name: str,
    config: ModelPowerControlConfig,
) -> Optional[ModelAdmissionPolicy]:
    """Return the policy gating ``transition_name``; None for unknown names."""
    if get_transition(transition_name) is None:
        return None
    return build_admission_policy(config)


def resolve_power_attributes(
    node: ModelNodeSnapshot,
    config: ModelPowerControlConfig,
    correlation_id: Optional[UUID] = None,
) -> tuple[str, str]:
    """Return the node's ``(name, endpoint)`` as known to the power backend.

    Raises:
        AttributeResolutionError: If either attribute is missing or empty.
    """
    values = node.get_values([config.name_url, config.server_url])
    if len(values) != 2:
        raise AttributeResolutionError(
            f"could not get node name and/or power server for node: {node.node_id}",
            context=ModelInfraErrorContext.with_correlation(
                correlation_id,
                transport_type=EnumInfraTransportType.RUNTIME,
                operation="resolve_attributes",
                target_name=node.node_id,
            ),
            missing=[
                path
                for path in (config.name_url, config.server_url)
                if path not in values
            ],
        )
    return values[config.name_url], values[config.server_url]


def check_admission(
    node: ModelNodeSnapshot,
    name: str,
    policy: ModelAdmissionPolicy,
    config: ModelPowerControlConfig,
    correlation_id: Optional[UUID] = None,
) -> None:
    """Verify that node ``name`` may be controlled.

    Raises:
        AdmissionError: If the node is not on the allow-list or the admission
            policy does not apply to it.
    """
    context = ModelInfraErrorContext.with_correlation(
        correlation_id,
        transport_type=EnumInfraTransportType.RUNTIME,
        operation="check_admission",
        target_name=name,
    )
    if not config.is_allowed(name):
        raise AdmissionError(
            f"cannot control power for unknown node: {name}",
            context=context,
            node_id=node.node_id,
        )
    if not policy.is_applicable(node):
        raise AdmissionError(
            f"admission policy does not apply to node: {name}",
            context=context,
            node_id=node.node_id,
            platform=node.get_value(config.platform_url),
        )


__all__: list[str] = [
    "build_admission_policy",
    "check_admission",
    "get_admission_policy",
    "resolve_power_attributes",
]
