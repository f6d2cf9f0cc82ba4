"""Pytest configuration and shared fixtures for omnibase_powerctl tests."""

from __future__ import annotations

import pytest

from omnibase_powerctl.models import ModelPowerControlConfig
from tests.helpers.power_stubs import CollectingObservationSink, StubPowerBackend


def assert_has_methods(
    obj: object,
    required_methods: list[str],
    *,
    protocol_name: str | None = None,
) -> None:
    """Assert that an object has all required methods (duck typing conformance).

    Example:
        >>> assert_has_methods(backend, ["power_on", "power_off", "query_state"])
    """
    name = protocol_name or obj.__class__.__name__
    for method_name in required_methods:
        assert hasattr(obj, method_name), f"{name} must have '{method_name}' method"
        assert callable(getattr(obj, method_name)), f"{name}.{method_name} must be callable"


@pytest.fixture
def power_config() -> ModelPowerControlConfig:
    """Configuration allowing node01..node03 on the default platform."""
    return ModelPowerControlConfig(
        node_names=["node01", "node02", "node03"],
        discovery_interval_seconds=0.0,
        discovery_query_timeout_seconds=1.0,
    )


@pytest.fixture
def stub_backend() -> StubPowerBackend:
    return StubPowerBackend()


@pytest.fixture
def collecting_sink() -> CollectingObservationSink:
    return CollectingObservationSink()
