"""Main CLI implementation using Typer."""

import asyncio
from pathlib import Path
from typing import Optional, Callable, Any

import typer
from rich.console import Console
from rich.markup import escape

from kubeforge.cli.commands import (
    USER_ERRORS,
    render_manifests,
    show_outputs,
    validate_workload,
    watch_and_render,
)


# Create Typer app
app = typer.Typer(
    name="kubeforge",
    help="Compile workload descriptions into Kubernetes manifests",
    add_completion=False,
)

# Errors go to stderr so stdout stays valid YAML
console = Console(stderr=True)


def _run_cli_command(handler: Callable[..., Any], **kwargs: Any):
    """Helper to run a CLI command with error handling."""
    try:
        handler(**kwargs)
    except USER_ERRORS as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def _watch(**kwargs: Any):
    """Run the watch loop until interrupted."""
    try:
        asyncio.run(watch_and_render(**kwargs))
    except KeyboardInterrupt:
        console.print("Stopped watching")


@app.command("render")
def render_command(
    workload: Path = typer.Argument(..., help="Workload YAML file"),
    overrides: Optional[Path] = typer.Option(
        None, "--overrides", help="YAML file deep-merged over the workload"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write manifests to this file instead of stdout"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="kubeforge configuration file"
    ),
    watch: bool = typer.Option(
        False, "--watch", "-w", help="Re-render whenever the input changes"
    ),
):
    """Render Secrets, the workload and its Service as YAML."""
    handler = _watch if watch else render_manifests
    _run_cli_command(
        handler, workload=workload, overrides=overrides, output=output, config_path=config
    )


@app.command("validate")
def validate_command(
    workload: Path = typer.Argument(..., help="Workload YAML file"),
    overrides: Optional[Path] = typer.Option(
        None, "--overrides", help="YAML file deep-merged over the workload"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="kubeforge configuration file"
    ),
):
    """Validate a workload without persisting its identifier."""
    _run_cli_command(validate_workload, workload=workload, overrides=overrides, config_path=config)


@app.command("outputs")
def outputs_command(
    workload: Path = typer.Argument(..., help="Workload YAML file"),
    overrides: Optional[Path] = typer.Option(
        None, "--overrides", help="YAML file deep-merged over the workload"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="kubeforge configuration file"
    ),
):
    """Print namespace, service and workload names as JSON."""
    _run_cli_command(show_outputs, workload=workload, overrides=overrides, config_path=config)


def main():
    """Main entry point for CLI."""
    app()
