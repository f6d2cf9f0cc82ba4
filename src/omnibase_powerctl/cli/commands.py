"""
Power Control CLI Commands.

Provides a CLI for running the power controller locally, running a one-off
discovery sweep and inspecting the transition table.
"""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.table import Table

console = Console()

_STATE_STYLES = {
    "ON": "bold green",
    "OFF": "dim",
    "UNKNOWN": "yellow",
    "HANG": "bold red",
}


@click.group()
def cli() -> None:
    """Node power-lifecycle controller."""


@cli.command("serve")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML configuration file (default: environment/defaults)",
)
@click.option(
    "--nodes",
    "nodes_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML node list loaded into the local node registry",
)
@click.option(
    "--simulate/--no-simulate",
    default=False,
    help="Use the in-memory simulated backend instead of powerman",
)
@click.option(
    "--grace-period",
    default=10.0,
    type=click.FloatRange(min=0.0),
    help="Seconds in-flight power actions may run on after shutdown",
)
def serve_cmd(
    config_path: str | None,
    nodes_path: str | None,
    simulate: bool,
    grace_period: float,
) -> None:
    """Run the controller until SIGINT/SIGTERM."""
    from omnibase_powerctl.runtime.kernel import bootstrap, configure_logging

    configure_logging()
    exit_code = asyncio.run(
        bootstrap(
            config_path=config_path,
            nodes_path=nodes_path,
            simulate=simulate,
            grace_period_seconds=grace_period,
        )
    )
    raise SystemExit(exit_code)


async def _run_discover(
    config_path: str | None,
    nodes_path: str,
    simulate: bool,
) -> None:
    """Async implementation for the discover command."""
    from omnibase_powerctl.runtime.kernel import (
        create_backend,
        discover_once,
        load_node_snapshots,
        load_power_control_config,
    )
    from omnibase_powerctl.utils.util_node_url import node_url_split

    config = load_power_control_config(config_path)
    nodes = load_node_snapshots(nodes_path)
    backend = create_backend(config, simulate=simulate)

    result, observations = await discover_once(config, nodes, backend)

    names = {node.node_id: node.get_value(config.name_url) or "" for node in nodes}
    table = Table(title="Discovered Power State")
    table.add_column("Node ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("PhysState")

    for event in sorted(observations, key=lambda e: e.target_path):
        node_id, _ = node_url_split(event.target_path)
        style = _STATE_STYLES.get(event.value_id, "")
        table.add_row(
            node_id,
            names.get(node_id, ""),
            f"[{style}]{event.value_id}[/{style}]" if style else event.value_id,
        )

    console.print(table)
    console.print(
        f"nodes: {result.nodes_seen}  admitted: {result.nodes_admitted}  "
        f"endpoints: {result.endpoints}  observed: {result.observations_emitted}  "
        f"failed: {result.query_failures}  ({result.duration_seconds:.2f}s)"
    )
    if result.registry_failed:
        console.print("[red]Node registry query failed[/red]")
        raise SystemExit(1)


@cli.command("discover")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML configuration file (default: environment/defaults)",
)
@click.option(
    "--nodes",
    "nodes_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML node list to sweep",
)
@click.option(
    "--simulate/--no-simulate",
    default=False,
    help="Use the in-memory simulated backend instead of powerman",
)
def discover_cmd(config_path: str | None, nodes_path: str, simulate: bool) -> None:
    """Run one discovery sweep and print the observed power states."""
    from omnibase_powerctl.errors import PowerControlError

    try:
        asyncio.run(_run_discover(config_path, nodes_path, simulate))
    except SystemExit:
        raise
    except PowerControlError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Error: {type(e).__name__}[/red]")
        raise SystemExit(1)


@cli.command("transitions")
def transitions_cmd() -> None:
    """List the PhysState transitions this controller executes."""
    from omnibase_powerctl.constants_power_control import FAILURE_STATE
    from omnibase_powerctl.runtime.transition_table import get_transition_table

    table = Table(title="PhysState Transitions")
    table.add_column("Name", style="cyan")
    table.add_column("From", style="bold")
    table.add_column("To", style="bold")
    table.add_column("Timeout", justify="right")
    table.add_column("On Failure", style="red")

    for transition in get_transition_table().values():
        table.add_row(
            transition.name,
            transition.from_state.value,
            transition.to_state.value,
            f"{transition.timeout_seconds:g}s",
            FAILURE_STATE.value,
        )

    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
