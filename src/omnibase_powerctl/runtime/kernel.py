# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Power Control Kernel - bootstrap entry point for a local controller run.

The kernel is responsible for:
    1. Loading configuration from YAML or environment
    2. Loading node records into the in-memory node registry
    3. Creating the event bus, power backend and observation sink
    4. Registering the module with the fabric registry
    5. Starting the service loop and the periodic discovery sweep
    6. Setting up graceful shutdown signal handlers

In production the fabric supplies the node registry, event stream and
module registry; this kernel wires in-memory stand-ins for all three so the
controller can be run and exercised on its own.

Environment Variables:
    POWERCTL_LOG_LEVEL: Logging level (default: INFO)
    POWERCTL_NODE_NAMES: Comma separated allow-list, overrides the config file
    POWERCTL_PLATFORM: Platform string, overrides the config file
    POWERCTL_POWERMAN_COMMAND: powerman executable, overrides the config file
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from omnibase_powerctl.enums import EnumInfraTransportType, EnumPowerState
from omnibase_powerctl.errors import (
    ModelInfraErrorContext,
    PowerControlError,
    ProtocolConfigurationError,
)
from omnibase_powerctl.event_bus.inmemory_event_bus import InMemoryEventBus
from omnibase_powerctl.event_bus.models import ModelEventMessage
from omnibase_powerctl.event_bus.topic_constants import DISCOVERY_TOPIC
from omnibase_powerctl.handlers.handler_powerman import HandlerPowerman
from omnibase_powerctl.handlers.handler_simulated_power import HandlerSimulatedPower
from omnibase_powerctl.handlers.protocol_power_backend import ProtocolPowerBackend
from omnibase_powerctl.models import (
    ModelNodeSnapshot,
    ModelObservationEvent,
    ModelPowerControlConfig,
    ModelReconcileResult,
)
from omnibase_powerctl.registry.inmemory_node_registry import (
    InMemoryFabricRegistry,
    InMemoryNodeRegistry,
)
from omnibase_powerctl.runtime.discovery_reconciler import DiscoveryReconciler
from omnibase_powerctl.runtime.module_registration import register_module
from omnibase_powerctl.runtime.mutation_dispatcher import MutationDispatcher
from omnibase_powerctl.runtime.observation_sink import (
    EventBusObservationSink,
    QueueObservationSink,
)
from omnibase_powerctl.runtime.service_power_control import ServicePowerControl
from omnibase_powerctl.utils.correlation import generate_correlation_id

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_SECONDS = 10.0

_ENV_NODE_NAMES = "POWERCTL_NODE_NAMES"
_ENV_PLATFORM = "POWERCTL_PLATFORM"
_ENV_POWERMAN_COMMAND = "POWERCTL_POWERMAN_COMMAND"
_ENV_LOG_LEVEL = "POWERCTL_LOG_LEVEL"

PathLike = Union[str, Path]


def _apply_env_overrides(raw_config: dict[str, object]) -> dict[str, object]:
    """Return ``raw_config`` with environment overrides applied."""
    merged = dict(raw_config)
    node_names = os.getenv(_ENV_NODE_NAMES)
    if node_names is not None:
        merged["node_names"] = [name for name in node_names.split(",") if name.strip()]
    platform = os.getenv(_ENV_PLATFORM)
    if platform:
        merged["platform"] = platform
    command = os.getenv(_ENV_POWERMAN_COMMAND)
    if command:
        merged["powerman_command"] = command
    return merged


def _read_yaml(path: Path, context: ModelInfraErrorContext, what: str) -> object:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProtocolConfigurationError(
            f"Failed to parse {what} YAML at {path}: {e}",
            context=context,
            config_path=str(path),
            error_details=str(e),
        ) from e
    except UnicodeDecodeError as e:
        raise ProtocolConfigurationError(
            f"{what} file contains binary or non-UTF-8 content: {path}",
            context=context,
            config_path=str(path),
            error_details=f"Encoding error at position {e.start}-{e.end}: {e.reason}",
        ) from e
    except OSError as e:
        raise ProtocolConfigurationError(
            f"Failed to read {what} at {path}: {e}",
            context=context,
            config_path=str(path),
            error_details=str(e),
        ) from e


def _validation_summary(e: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in e.errors()
    ]


def load_power_control_config(
    path: Optional[PathLike] = None,
) -> ModelPowerControlConfig:
    """Load the controller configuration.

    Load Order:
        1. Read ``path`` when given and present
        2. Apply environment variable overrides
        3. Fill the remaining fields with defaults

    Args:
        path: Optional YAML configuration file. A missing file is not an
            error; defaults and environment are used instead.

    Returns:
        Validated configuration.

    Raises:
        ProtocolConfigurationError: If the file cannot be read or parsed, is
            not a mapping, or fails validation.

    Example:
        >>> config = load_power_control_config("powerctl.yaml")
        >>> config.platform
        'powerman'
    """
    correlation_id = generate_correlation_id()
    config_path = Path(path) if path is not None else None
    context = ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.RUNTIME,
        operation="load_config",
        target_name=str(config_path) if config_path else "environment",
        correlation_id=correlation_id,
    )

    raw_config: dict[str, object] = {}
    if config_path is not None and config_path.exists():
        logger.info(
            "Loading power control config from %s (correlation_id=%s)",
            config_path,
            correlation_id,
        )
        loaded = _read_yaml(config_path, context, "power control config")
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ProtocolConfigurationError(
                f"Power control config at {config_path} must be a mapping, "
                f"got {type(loaded).__name__}",
                context=context,
                config_path=str(config_path),
            )
        raw_config = loaded
    else:
        logger.info(
            "No power control config found at %s, using environment/defaults "
            "(correlation_id=%s)",
            config_path,
            correlation_id,
        )

    try:
        config = ModelPowerControlConfig.model_validate(_apply_env_overrides(raw_config))
    except ValidationError as e:
        errors = _validation_summary(e)
        raise ProtocolConfigurationError(
            f"Power control config validation failed: {e.error_count()} error(s). "
            f"First errors: {'; '.join(errors[:3])}",
            context=context,
            validation_errors=errors,
            error_count=e.error_count(),
        ) from e

    logger.debug(
        "Power control config loaded (correlation_id=%s)",
        correlation_id,
        extra={
            "node_count": len(config.node_names),
            "platform": config.platform,
            "max_in_flight": config.max_in_flight,
        },
    )
    return config


def load_node_snapshots(path: PathLike) -> list[ModelNodeSnapshot]:
    """Load node records from a YAML list of ``{node_id, values}`` mappings.

    Raises:
        ProtocolConfigurationError: If the file is missing, unreadable or
            does not hold a list of valid node records.
    """
    nodes_path = Path(path)
    context = ModelInfraErrorContext(
        transport_type=EnumInfraTransportType.REGISTRY,
        operation="load_nodes",
        target_name=str(nodes_path),
    )
    loaded = _read_yaml(nodes_path, context, "node list")
    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise ProtocolConfigurationError(
            f"Node list at {nodes_path} must be a list, got {type(loaded).__name__}",
            context=context,
            config_path=str(nodes_path),
        )
    try:
        return [ModelNodeSnapshot.model_validate(item) for item in loaded]
    except ValidationError as e:
        errors = _validation_summary(e)
        raise ProtocolConfigurationError(
            f"Node list validation failed at {nodes_path}: {'; '.join(errors[:3])}",
            context=context,
            config_path=str(nodes_path),
            validation_errors=errors,
        ) from e


def create_backend(
    config: ModelPowerControlConfig,
    simulate: bool = False,
) -> Union[HandlerPowerman, HandlerSimulatedPower]:
    """Create the powerman backend, or the in-memory simulation."""
    if simulate:
        return HandlerSimulatedPower(default_state=EnumPowerState.OFF)
    return HandlerPowerman(config.powerman_command)


async def discover_once(
    config: ModelPowerControlConfig,
    nodes: list[ModelNodeSnapshot],
    backend: ProtocolPowerBackend,
) -> tuple[ModelReconcileResult, list[ModelObservationEvent]]:
    """Run a single discovery sweep over ``nodes`` and collect the observations."""
    sink = QueueObservationSink()
    reconciler = DiscoveryReconciler(InMemoryNodeRegistry(nodes), backend, sink, config)
    result = await reconciler.reconcile_all()
    return result, sink.drain_nowait()


async def _log_observation(message: ModelEventMessage) -> None:
    event = ModelObservationEvent.model_validate_json(message.value)
    logger.info(
        "observed %s = %s",
        event.target_path,
        event.value_id,
        extra={"producer_id": event.producer_id},
    )


def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    shutdown_event: asyncio.Event,
    correlation_id: object,
) -> None:
    def handle_shutdown(sig: signal.Signals) -> None:
        logger.info(
            "Received %s, initiating graceful shutdown... (correlation_id=%s)",
            sig.name,
            correlation_id,
        )
        shutdown_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, handle_shutdown, sig)
    else:
        def windows_handler(signum: int, frame: object) -> None:
            sig = signal.Signals(signum)
            logger.info(
                "Received %s, initiating graceful shutdown... (correlation_id=%s)",
                sig.name,
                correlation_id,
            )
            loop.call_soon_threadsafe(shutdown_event.set)

        signal.signal(signal.SIGINT, windows_handler)


async def bootstrap(
    config_path: Optional[PathLike] = None,
    nodes_path: Optional[PathLike] = None,
    simulate: bool = False,
    shutdown_event: Optional[asyncio.Event] = None,
    grace_period_seconds: float = DEFAULT_GRACE_PERIOD_SECONDS,
    install_signal_handlers: bool = True,
) -> int:
    """Run the power controller until a shutdown signal arrives.

    Args:
        config_path: YAML configuration file
        nodes_path: YAML node list loaded into the in-memory node registry
        simulate: Use the simulated backend instead of powerman
        shutdown_event: Event that stops the run; created when omitted
        grace_period_seconds: How long in-flight power actions may run on
            after shutdown before they are cancelled
        install_signal_handlers: Register SIGINT/SIGTERM handlers

    Returns:
        Exit code: 0 on clean shutdown, 1 on configuration or runtime error.
    """
    correlation_id = generate_correlation_id()
    bootstrap_start_time = time.time()
    event_bus: Optional[InMemoryEventBus] = None
    service: Optional[ServicePowerControl] = None
    reconciler: Optional[DiscoveryReconciler] = None
    service_task: Optional[asyncio.Task[None]] = None

    try:
        config = load_power_control_config(config_path)
        nodes = load_node_snapshots(nodes_path) if nodes_path is not None else []

        event_bus = InMemoryEventBus(source="powerctl.local")
        await event_bus.start()
        await event_bus.subscribe(DISCOVERY_TOPIC, "powerctl-log", _log_observation)

        registry = InMemoryNodeRegistry(nodes)
        backend = create_backend(config, simulate=simulate)
        logger.info("power backend ready", extra=await backend.health_check())
        sink = EventBusObservationSink(event_bus)

        register_module(InMemoryFabricRegistry(), config)

        dispatcher = MutationDispatcher(backend, sink, config)
        reconciler = DiscoveryReconciler(registry, backend, sink, config)
        service = ServicePowerControl(config, dispatcher, reconciler, sink)
        await service.attach(event_bus)

        if shutdown_event is None:
            shutdown_event = asyncio.Event()
        if install_signal_handlers:
            _install_signal_handlers(
                asyncio.get_running_loop(), shutdown_event, correlation_id
            )

        service_task = asyncio.create_task(service.run(), name="powerctl-service")
        reconciler.start()

        logger.info(
            "Power controller started in %.3fs (correlation_id=%s)",
            time.time() - bootstrap_start_time,
            correlation_id,
            extra={
                "node_count": len(nodes),
                "allow_list_size": len(config.node_names),
                "backend": "simulated" if simulate else "powerman",
            },
        )

        await shutdown_event.wait()

        shutdown_start_time = time.time()
        logger.info(
            "Shutdown signal received, stopping controller (timeout=%ss, correlation_id=%s)",
            grace_period_seconds,
            correlation_id,
        )
        await reconciler.stop()
        await service.stop()
        await service_task
        service_task = None

        if not await dispatcher.drain(timeout=grace_period_seconds):
            logger.warning(
                "Graceful shutdown timed out after %s seconds, cancelling %d "
                "power action(s) (correlation_id=%s)",
                grace_period_seconds,
                dispatcher.in_flight,
                correlation_id,
            )
            await dispatcher.cancel_all()

        logger.info(
            "Power controller stopped in %.3fs (correlation_id=%s)",
            time.time() - shutdown_start_time,
            correlation_id,
        )
        return 0

    except ProtocolConfigurationError as e:
        logger.exception(
            "Power controller configuration failed (correlation_id=%s)",
            correlation_id,
            extra={"error_type": type(e).__name__, "error_code": e.error_code.name},
        )
        return 1

    except PowerControlError as e:
        logger.exception(
            "Power controller error (correlation_id=%s)",
            correlation_id,
            extra={"error_type": type(e).__name__, "error_code": e.error_code.name},
        )
        return 1

    except Exception as e:
        logger.exception(
            "Power controller failed with unexpected error: %s (correlation_id=%s)",
            e,
            correlation_id,
            extra={"error_type": type(e).__name__},
        )
        return 1

    finally:
        if reconciler is not None:
            await reconciler.stop()
        if service_task is not None and service is not None:
            await service.stop()
            try:
                await service_task
            except Exception as cleanup_error:
                logger.warning(
                    "Failed to stop service during cleanup: %s (correlation_id=%s)",
                    cleanup_error,
                    correlation_id,
                )
        if event_bus is not None:
            await event_bus.close()


def configure_logging() -> None:
    """Configure the root logger from ``POWERCTL_LOG_LEVEL`` (default INFO)."""
    log_level = os.getenv(_ENV_LOG_LEVEL, "INFO").upper()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if log_level not in valid_levels:
        print(
            f"Warning: Invalid {_ENV_LOG_LEVEL} '{log_level}', using INFO. "
            f"Valid levels: {', '.join(sorted(valid_levels))}",
            file=sys.stderr,
        )
        log_level = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> None:
    """Synchronous entry point: ``python -m omnibase_powerctl.runtime.kernel``.

    Reads the config and node list paths from ``POWERCTL_CONFIG`` and
    ``POWERCTL_NODES``.
    """
    configure_logging()
    exit_code = asyncio.run(
        bootstrap(
            config_path=os.getenv("POWERCTL_CONFIG"),
            nodes_path=os.getenv("POWERCTL_NODES"),
        )
    )
    sys.exit(exit_code)


__all__: list[str] = [
    "bootstrap",
    "configure_logging",
    "create_backend",
    "discover_once",
    "load_node_snapshots",
    "load_power_control_config",
    "main",
]


if __name__ == "__main__":
    main()
