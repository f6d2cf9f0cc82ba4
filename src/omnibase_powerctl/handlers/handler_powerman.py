# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Powerman Handler - power control through the ``powerman`` client.

Runs the powerman command-line client as a subprocess:

    powerman [-h <endpoint>] -1 <node>   power on
    powerman [-h <endpoint>] -0 <node>   power off
    powerman [-h <endpoint>] -Q <node>   query

The query prints exactly three lines listing the nodes that are on, off and
in an unknown state, in that order:

    on:      node01
    off:
    unknown:

Node lists may be compressed hostlists (``node[01-04,07]``); they are
expanded before matching so that ``node1`` never matches ``node10``.

No retries and no internal timeout. If the awaiting task is cancelled the
child process is killed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re

from omnibase_powerctl.constants_power_control import DEFAULT_POWERMAN_COMMAND
from omnibase_powerctl.enums import EnumInfraTransportType, EnumPowerState
from omnibase_powerctl.errors import (
    BackendInvocationError,
    DiscoveryParseError,
    ModelInfraErrorContext,
)

logger = logging.getLogger(__name__)

_FLAG_ON = "-1"
_FLAG_OFF = "-0"
_FLAG_QUERY = "-Q"
_FLAG_SERVER_HOST = "-h"

# Query output line order
_QUERY_LINE_STATES: tuple[EnumPowerState, ...] = (
    EnumPowerState.ON,
    EnumPowerState.OFF,
    EnumPowerState.UNKNOWN,
)

_HOSTLIST_RANGE = re.compile(r"^(?P<prefix>[^\[\]]*)\[(?P<ranges>[^\[\]]+)\](?P<suffix>[^\[\]]*)$")
_DECIMAL = re.compile(r"[0-9]+")


def _split_hostlist(members: str) -> list[str]:
    """Split a hostlist on commas/whitespace that are outside brackets."""
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    for char in members:
        if char == "[":
            depth += 1
        elif char == "]":
            depth = max(0, depth - 1)
        if depth == 0 and (char == "," or char.isspace()):
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def _expand_host(token: str) -> list[str]:
    """Expand one ``prefix[a-b,c]suffix`` hostlist token."""
    match = _HOSTLIST_RANGE.match(token)
    if match is None:
        return [token]
    prefix = match.group("prefix")
    suffix = match.group("suffix")
    hosts: list[str] = []
    for part in match.group("ranges").split(","):
        low, sep, high = part.partition("-")
        if not sep:
            hosts.append(f"{prefix}{low}{suffix}")
            continue
        if not (_DECIMAL.fullmatch(low) and _DECIMAL.fullmatch(high)):
            return [token]
        width = len(low) if low.startswith("0") else 0
        for index in range(int(low), int(high) + 1):
            hosts.append(f"{prefix}{str(index).zfill(width)}{suffix}")
    return hosts


def expand_hostlist(members: str) -> set[str]:
    """Expand a powerman hostlist into the set of node names it covers.

    Example:
        >>> sorted(expand_hostlist("node[1-3],gpu07"))
        ['gpu07', 'node1', 'node2', 'node3']
    """
    hosts: set[str] = set()
    for token in _split_hostlist(members):
        hosts.update(_expand_host(token))
    return hosts


def parse_query_output(output: str, name: str) -> EnumPowerState:
    """Map powerman query output to the power state of node ``name``.

    Lines are checked in fixed order (on, off, unknown); the first line
    listing the node wins.

    Raises:
        DiscoveryParseError: If the output is not exactly three lines or the
            node appears in none of them.
    """
    lines = output.splitlines()
    if len(lines) != len(_QUERY_LINE_STATES):
        raise DiscoveryParseError(
            f"Unexpected powerman query output: expected "
            f"{len(_QUERY_LINE_STATES)} lines, got {len(lines)}",
            target_name=name,
            line_count=len(lines),
        )

    for line, state in zip(lines, _QUERY_LINE_STATES):
        _, sep, members = line.partition(":")
        if name in expand_hostlist(members if sep else line):
            return state

    raise DiscoveryParseError(
        f"Node not found in powerman query output: {name}",
        target_name=name,
    )


class HandlerPowerman:
    """Power backend running the powerman client as a subprocess."""

    def __init__(self, command: str = DEFAULT_POWERMAN_COMMAND) -> None:
        """Initialize with the powerman executable name or path."""
        self._command = command

    @property
    def command(self) -> str:
        return self._command

    async def power_on(self, endpoint: str, name: str) -> None:
        """Power on ``name``. Raises BackendInvocationError on failure."""
        await self._run("power_on", endpoint, name, _FLAG_ON)

    async def power_off(self, endpoint: str, name: str) -> None:
        """Power off ``name``. Raises BackendInvocationError on failure."""
        await self._run("power_off", endpoint, name, _FLAG_OFF)

    async def query_state(self, endpoint: str, name: str) -> EnumPowerState:
        """Query the power state of ``name``.

        Raises:
            BackendInvocationError: If the query command fails.
            DiscoveryParseError: If the output cannot be mapped to a state.
        """
        stdout = await self._run("query_state", endpoint, name, _FLAG_QUERY)
        return parse_query_output(stdout, name)

    def build_argv(self, endpoint: str, flag: str, name: str) -> list[str]:
        """Build the powerman command line for one operation."""
        argv = [self._command]
        if endpoint:
            argv.extend([_FLAG_SERVER_HOST, endpoint])
        argv.extend([flag, name])
        return argv

    async def _run(self, operation: str, endpoint: str, name: str, flag: str) -> str:
        """Run one powerman command and return its decoded stdout."""
        argv = self.build_argv(endpoint, flag, name)
        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.PROCESS,
            operation=operation,
            target_name=name,
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise BackendInvocationError(
                f"Failed to launch {self._command}: {e}",
                context=context,
                endpoint=endpoint,
            ) from e

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            raise

        if process.returncode != 0:
            stderr_text = stderr.decode("utf-8", errors="replace").strip()
            raise BackendInvocationError(
                f"{self._command} {flag} {name} exited with status "
                f"{process.returncode}: {stderr_text}",
                context=context,
                endpoint=endpoint,
                exit_code=process.returncode,
            )

        logger.debug(
            "powerman %s succeeded for %s",
            operation,
            name,
            extra={"node": name, "endpoint": endpoint, "operation": operation},
        )
        return stdout.decode("utf-8", errors="replace")

    async def health_check(self) -> dict[str, object]:
        """Return handler health status."""
        return {
            "healthy": True,
            "command": self._command,
            "handler_type": "powerman",
        }

    def describe(self) -> dict[str, object]:
        """Return handler metadata and capabilities."""
        return {
            "handler_type": "powerman",
            "supported_operations": ["power_off", "power_on", "query_state"],
            "command": self._command,
        }


__all__: list[str] = [
    "HandlerPowerman",
    "expand_hostlist",
    "parse_query_output",
]
