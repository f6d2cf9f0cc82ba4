# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Discovery Reconciler - periodic power state sweep over the node registry.

Each sweep reads the node registry once, keeps the nodes this module may
control (complete attributes, matching platform, on the allow-list), groups
them by power server endpoint and queries their actual power state.

Endpoint groups are queried concurrently. Within a group, queries run one
after another so a single power server is not flooded. Every query is
bounded by ``discovery_query_timeout_seconds``; a hung query counts as a
failure and the sweep moves on.

Query failures are expected during normal operation (a power server being
restarted, a node missing from its configuration) and are logged at DEBUG.
Whatever a single query raises, the remaining nodes are still queried and
the periodic loop keeps running; the next sweep tries again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict
from typing import Optional

from omnibase_powerctl.constants_power_control import PHYS_STATE_URL
from omnibase_powerctl.errors import BackendInvocationError
from omnibase_powerctl.handlers.protocol_power_backend import ProtocolPowerBackend
from omnibase_powerctl.models import (
    ModelNodeSnapshot,
    ModelObservationEvent,
    ModelPowerControlConfig,
    ModelReconcileResult,
)
from omnibase_powerctl.registry.protocol_node_registry import ProtocolNodeRegistry
from omnibase_powerctl.runtime.observation_sink import ProtocolObservationSink

logger = logging.getLogger(__name__)


class DiscoveryReconciler:
    """Queries actual power state for every admissible node.

    Example:
        >>> reconciler = DiscoveryReconciler(registry, backend, sink, config)
        >>> result = await reconciler.reconcile_all()
        >>> result.observations_emitted
        3
    """

    def __init__(
        self,
        registry: ProtocolNodeRegistry,
        backend: ProtocolPowerBackend,
        sink: ProtocolObservationSink,
        config: ModelPowerControlConfig,
    ) -> None:
        self._registry = registry
        self._backend = backend
        self._sink = sink
        self._config = config
        self._sweep_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()
        self._last_result: Optional[ModelReconcileResult] = None

    @property
    def last_result(self) -> Optional[ModelReconcileResult]:
        """Counters of the most recent completed sweep."""
        return self._last_result

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def update_config(self, config: ModelPowerControlConfig) -> None:
        """Use ``config`` from the next sweep on."""
        self._config = config

    def _select_nodes(
        self,
        nodes: list[ModelNodeSnapshot],
        config: ModelPowerControlConfig,
    ) -> dict[str, list[tuple[ModelNodeSnapshot, str]]]:
        """Group admissible nodes by endpoint as ``(node, name)`` pairs."""
        by_endpoint: dict[str, list[tuple[ModelNodeSnapshot, str]]] = defaultdict(list)
        for node in nodes:
            platform = node.get_value(config.platform_url)
            name = node.get_value(config.name_url)
            endpoint = node.get_value(config.server_url)
            if platform is None or name is None or endpoint is None:
                logger.debug(
                    "skipping node %s: missing platform, name or server",
                    node.node_id,
                )
                continue
            if platform != config.platform:
                logger.debug(
                    "skipping node %s: platform %s is not %s",
                    node.node_id,
                    platform,
                    config.platform,
                )
                continue
            if not config.is_allowed(name):
                logger.debug("skipping node %s: not in node list", name)
                continue
            by_endpoint[endpoint].append((node, name))
        return by_endpoint

    async def _query_group(
        self,
        endpoint: str,
        members: list[tuple[ModelNodeSnapshot, str]],
        config: ModelPowerControlConfig,
    ) -> tuple[int, int]:
        """Query every node behind one endpoint. Returns (emitted, failed)."""
        emitted = 0
        failed = 0
        for node, name in members:
            try:
                state = await asyncio.wait_for(
                    self._backend.query_state(endpoint, name),
                    timeout=config.discovery_query_timeout_seconds,
                )
            except TimeoutError:
                failed += 1
                logger.debug(
                    "power query for %s timed out after %.1fs",
                    name,
                    config.discovery_query_timeout_seconds,
                    extra={"node": name, "endpoint": endpoint},
                )
                continue
            except BackendInvocationError as e:
                failed += 1
                logger.debug(
                    "power query for %s failed: %s",
                    name,
                    e,
                    extra={"node": name, "endpoint": endpoint},
                )
                continue
            except Exception as e:
                failed += 1
                logger.debug(
                    "power query for %s raised unexpectedly: %s",
                    name,
                    e,
                    exc_info=True,
                    extra={"node": name, "endpoint": endpoint},
                )
                continue

            try:
                await self._sink.emit(
                    ModelObservationEvent.for_node(
                        node.node_id,
                        PHYS_STATE_URL,
                        config.module_name,
                        state.value,
                    )
                )
            except Exception as e:
                failed += 1
                logger.error(
                    "failed to emit power state for %s: %s",
                    name,
                    e,
                    exc_info=True,
                    extra={"node": name, "endpoint": endpoint},
                )
                continue
            emitted += 1
        return emitted, failed

    async def reconcile_all(self) -> ModelReconcileResult:
        """Run one discovery sweep.

        Never raises for per-node or registry failures; they are reflected
        in the returned counters. A sweep requested while another is running
        waits for it to finish first.
        """
        async with self._sweep_lock:
            config = self._config
            started = time.monotonic()

            try:
                nodes = await self._registry.query_read_all()
            except Exception as e:
                logger.error(
                    "node registry query failed, skipping discovery sweep: %s",
                    e,
                    exc_info=True,
                )
                result = ModelReconcileResult(
                    registry_failed=True,
                    duration_seconds=time.monotonic() - started,
                )
                self._last_result = result
                return result

            by_endpoint = self._select_nodes(nodes, config)
            outcomes = await asyncio.gather(
                *(
                    self._query_group(endpoint, members, config)
                    for endpoint, members in by_endpoint.items()
                )
            )

            result = ModelReconcileResult(
                nodes_seen=len(nodes),
                nodes_admitted=sum(len(members) for members in by_endpoint.values()),
                endpoints=len(by_endpoint),
                observations_emitted=sum(emitted for emitted, _ in outcomes),
                query_failures=sum(failed for _, failed in outcomes),
                duration_seconds=time.monotonic() - started,
            )
            self._last_result = result

        logger.debug(
            "discovery sweep finished",
            extra=result.model_dump(),
        )
        return result

    def start(self) -> None:
        """Start the periodic sweep. No-op when the interval is 0 or already running."""
        if self._config.discovery_interval_seconds <= 0:
            logger.info("periodic discovery disabled")
            return
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.get_running_loop().create_task(
            self._run_loop(), name="powerctl-discovery"
        )
        logger.info(
            "periodic discovery started",
            extra={"interval_seconds": self._config.discovery_interval_seconds},
        )

    async def stop(self) -> None:
        """Stop the periodic sweep and wait for the loop to exit."""
        if self._task is None:
            return
        self._stop_event.set()
        task = self._task
        self._task = None
        try:
            await asyncio.wait_for(task, timeout=self._config.discovery_query_timeout_seconds)
        except TimeoutError:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        logger.info("periodic discovery stopped")

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.reconcile_all()
            except Exception:
                logger.exception("discovery sweep failed, retrying next interval")
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=self._config.discovery_interval_seconds,
                )
            except TimeoutError:
                pass


__all__: list[str] = ["DiscoveryReconciler"]
