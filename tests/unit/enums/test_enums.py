# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for power control enumerations."""

from __future__ import annotations

import pytest

from omnibase_powerctl.enums import (
    EnumMutationType,
    EnumPowerState,
    EnumRunState,
    EnumServiceState,
)


class TestEnumPowerState:
    def test_members(self) -> None:
        assert [s.value for s in EnumPowerState] == ["UNKNOWN", "OFF", "ON", "HANG"]

    def test_is_string_enum(self) -> None:
        assert EnumPowerState.ON == "ON"
        assert EnumPowerState("HANG") is EnumPowerState.HANG

    def test_rejects_unknown_value(self) -> None:
        with pytest.raises(ValueError):
            EnumPowerState("POWER_ON")


def test_mutation_types() -> None:
    assert {m.value for m in EnumMutationType} == {"MUTATE", "INTERRUPT"}


def test_declared_run_and_service_states() -> None:
    assert EnumRunState.UNKNOWN.value == "UNKNOWN"
    assert EnumServiceState.RUN.value == "RUN"
