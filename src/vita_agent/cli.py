"""CLI for the VitaKube node agent.

Provides a command-line interface using Typer for:
- Running the collection loop
- One-shot container collection for inspection
- Detecting the cgroup hierarchy version
- Generating a sample configuration
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from vita_agent.agent import Agent
from vita_agent.core.config import apply_env_overrides, load_config
from vita_agent.core.constants import DEFAULT_CGROUP_ROOT, DEFAULT_NODE_NAME
from vita_agent.core.schemas import AgentConfig, ResourceSample
from vita_agent.monitoring.base import SampleBuffer
from vita_agent.monitoring.container_metrics import ContainerMetricsCollector
from vita_agent.monitoring.detector import detect_cgroup_version
from vita_agent.utils.logging import setup_logging

app = typer.Typer(
    name="vita-agent",
    help="VitaKube node agent",
    add_completion=False,
)

console = Console()


@app.command()
def run(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to agent configuration file (YAML/JSON)"
    ),
    node_name: str | None = typer.Option(None, "--node-name", help="Override node name"),
    endpoint: str | None = typer.Option(None, "--endpoint", help="Override consumer endpoint"),
    interval: int | None = typer.Option(
        None, "--interval", "-i", min=1, help="Override collection interval (seconds)"
    ),
    once: bool = typer.Option(False, "--once", help="Run a single tick and exit"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Logging level"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file in addition to console"
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Output logs in JSON format (for log shippers)"
    ),
) -> None:
    """Run the collection loop (configuration file < environment < flags)."""
    setup_logging(
        level=log_level, log_file=log_file, json_format=json_logs, rich_console=not json_logs
    )

    try:
        agent_config = load_config(config) if config is not None else AgentConfig()
        agent_config = apply_env_overrides(agent_config)
        overrides = {
            "node_name": node_name,
            "consumer_endpoint": endpoint,
            "collection_interval_seconds": interval,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            agent_config = AgentConfig.model_validate({**agent_config.model_dump(), **overrides})
    except Exception as e:
        console.print(f"[bold red]Error loading config: {e}[/]")
        raise typer.Exit(1) from e

    agent = Agent(agent_config)

    if once:
        counts = agent.run_once()
        console.print(f"[bold green]Tick complete:[/] {counts}")
        return

    try:
        agent.run_forever()
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted, exiting[/]")


@app.command()
def collect(
    cgroup_root: Path = typer.Option(
        DEFAULT_CGROUP_ROOT, "--cgroup-root", help="cgroup filesystem mount point"
    ),
    node_name: str = typer.Option(DEFAULT_NODE_NAME, "--node-name", help="Node name for samples"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
) -> None:
    """Walk the cgroup hierarchy once and print the samples (nothing is sent)."""
    setup_logging(level=log_level)

    buffer = SampleBuffer()
    ContainerMetricsCollector(node_name, cgroup_root).collect(buffer)

    if buffer.samples:
        _show_samples_table(buffer.samples)
    else:
        console.print("[bold yellow]No pod or container cgroups found[/]")


@app.command()
def detect(
    cgroup_root: Path = typer.Option(
        DEFAULT_CGROUP_ROOT, "--cgroup-root", help="cgroup filesystem mount point"
    ),
) -> None:
    """Print the cgroup hierarchy version in use."""
    version = detect_cgroup_version(cgroup_root)
    console.print(f"cgroup {version.value}")


@app.command()
def init_config(
    output: Path = typer.Option(
        Path("vita-agent.yaml"), "--output", "-o", help="Output configuration file"
    ),
) -> None:
    """Generate a sample configuration file."""
    sample_config = """\
# VitaKube node agent configuration
# NODE_NAME, CONSUMER_ENDPOINT and COLLECTION_INTERVAL environment
# variables override the values below.
node_name: "worker-1"
consumer_endpoint: "http://vita-consumer:8080/api/v1/ingest"
collection_interval_seconds: 1
http_timeout_seconds: 5.0

# Host paths (change when the host filesystem is mounted elsewhere)
cgroup_root: "/sys/fs/cgroup"
proc_root: "/proc"
kubelet_pods_dir: "/var/lib/kubelet/pods"

# Collectors
collect_system: true
collect_containers: true
collect_pvc: true
"""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(sample_config)
    console.print(f"[bold green]Sample configuration written to {output}[/]")


def _show_samples_table(samples: list[ResourceSample]) -> None:
    """Display collected samples."""
    table = Table(title="Container Samples")
    table.add_column("Pod", style="cyan")
    table.add_column("Container", style="white")
    table.add_column("CPU (ms)", justify="right", style="green")
    table.add_column("Memory (MB)", justify="right", style="green")
    table.add_column("Limit (MB)", justify="right")

    for s in samples:
        table.add_row(
            s.pod_id,
            s.container_id or "-",
            f"{s.cpu_ms:,}",
            f"{s.mem_mb:,}",
            f"{s.mem_limit_mb:,}" if s.mem_limit_mb else "unlimited",
        )

    console.print(table)


if __name__ == "__main__":
    app()
