# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for HandlerPowerman and powerman query parsing."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from omnibase_powerctl.enums import EnumErrorCode, EnumPowerState
from omnibase_powerctl.errors import BackendInvocationError, DiscoveryParseError
from omnibase_powerctl.handlers.handler_powerman import (
    HandlerPowerman,
    expand_hostlist,
    parse_query_output,
)


def _process(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


class TestParseQueryOutput:
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ("on:      node01\noff:\nunknown:\n", EnumPowerState.ON),
            ("on:\noff:     node01\nunknown:\n", EnumPowerState.OFF),
            ("on:\noff:\nunknown: node01\n", EnumPowerState.UNKNOWN),
        ],
    )
    def test_line_position_maps_to_state(self, output: str, expected: EnumPowerState) -> None:
        assert parse_query_output(output, "node01") == expected

    def test_first_matching_line_wins(self) -> None:
        assert parse_query_output("on: node01\noff: node01\nunknown:", "node01") == (
            EnumPowerState.ON
        )

    def test_node_in_no_line_is_a_parse_error(self) -> None:
        with pytest.raises(DiscoveryParseError) as exc_info:
            parse_query_output("on: node02\noff:\nunknown:\n", "node01")

        assert exc_info.value.error_code == EnumErrorCode.PARSING_ERROR
        assert isinstance(exc_info.value, BackendInvocationError)

    @pytest.mark.parametrize(
        "output",
        ["", "on: node01\n", "on: node01\noff:\n", "on:\noff:\nunknown:\nextra: node01\n"],
    )
    def test_wrong_line_count_is_a_parse_error(self, output: str) -> None:
        with pytest.raises(DiscoveryParseError, match="expected 3 lines"):
            parse_query_output(output, "node01")

    def test_name_prefix_does_not_match(self) -> None:
        with pytest.raises(DiscoveryParseError):
            parse_query_output("on: node10\noff:\nunknown:\n", "node1")

    def test_compressed_hostlist(self) -> None:
        output = "on:      node[01-04,07]\noff:     node[05-06]\nunknown:\n"
        assert parse_query_output(output, "node03") == EnumPowerState.ON
        assert parse_query_output(output, "node06") == EnumPowerState.OFF

    def test_non_ascii_digit_range_is_a_parse_error(self) -> None:
        with pytest.raises(DiscoveryParseError, match="not found"):
            parse_query_output("on: node[1-\N{SUPERSCRIPT TWO}]\noff:\nunknown:", "node1")


class TestExpandHostlist:
    def test_plain_names(self) -> None:
        assert expand_hostlist("node01,node02 gpu7") == {"node01", "node02", "gpu7"}

    def test_ranges_keep_zero_padding(self) -> None:
        assert expand_hostlist("n[08-10]") == {"n08", "n09", "n10"}

    def test_mixed_ranges_and_singles(self) -> None:
        assert expand_hostlist("node[1-2,5],io1") == {"node1", "node2", "node5", "io1"}

    @pytest.mark.parametrize(
        "token",
        ["node[1-\N{SUPERSCRIPT TWO}]", "node[\N{ARABIC-INDIC DIGIT ONE}-3]", "node[a-c]"],
    )
    def test_non_decimal_range_is_kept_verbatim(self, token: str) -> None:
        assert expand_hostlist(token) == {token}

    def test_empty(self) -> None:
        assert expand_hostlist("   ") == set()


class TestBuildArgv:
    def test_with_endpoint(self) -> None:
        handler = HandlerPowerman()
        assert handler.build_argv("pm1:10101", "-1", "node01") == [
            "powerman",
            "-h",
            "pm1:10101",
            "-1",
            "node01",
        ]

    def test_without_endpoint(self) -> None:
        handler = HandlerPowerman("/usr/bin/pm")
        assert handler.build_argv("", "-Q", "node01") == ["/usr/bin/pm", "-Q", "node01"]


class TestSubprocess:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "flag"),
        [("power_on", "-1"), ("power_off", "-0")],
    )
    async def test_power_commands(self, method: str, flag: str) -> None:
        handler = HandlerPowerman()
        exec_mock = AsyncMock(return_value=_process())

        with patch("asyncio.create_subprocess_exec", exec_mock):
            await getattr(handler, method)("pm1", "node01")

        args = exec_mock.call_args.args
        assert list(args) == ["powerman", "-h", "pm1", flag, "node01"]

    @pytest.mark.asyncio
    async def test_query_state(self) -> None:
        handler = HandlerPowerman()
        proc = _process(stdout=b"on:\noff:     node01\nunknown:\n")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            state = await handler.query_state("pm1", "node01")

        assert state == EnumPowerState.OFF

    @pytest.mark.asyncio
    async def test_non_zero_exit_raises(self) -> None:
        handler = HandlerPowerman()
        proc = _process(returncode=1, stderr=b"Command completed with errors\n")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(BackendInvocationError) as exc_info:
                await handler.power_on("pm1", "node01")

        assert exc_info.value.context["exit_code"] == 1
        assert exc_info.value.context["operation"] == "power_on"
        assert "Command completed with errors" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_executable_raises(self) -> None:
        handler = HandlerPowerman("/nonexistent/powerman")

        with patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("no such file")),
        ):
            with pytest.raises(BackendInvocationError, match="Failed to launch"):
                await handler.power_off("pm1", "node01")

    @pytest.mark.asyncio
    async def test_cancellation_kills_process(self) -> None:
        handler = HandlerPowerman()
        proc = MagicMock()
        proc.communicate = AsyncMock(side_effect=asyncio.CancelledError())

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(asyncio.CancelledError):
                await handler.power_on("pm1", "node01")

        proc.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_describe_and_health(self) -> None:
        handler = HandlerPowerman()

        assert handler.describe()["supported_operations"] == [
            "power_off",
            "power_on",
            "query_state",
        ]
        assert (await handler.health_check())["healthy"] is True
