"""Command implementations for CLI."""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from ruamel.yaml.error import YAMLError
from watchfiles import awatch

from kubeforge.compiler import Compiler, FileIdentifierStore, ManifestError, MemoryIdentifierStore
from kubeforge.config import WorkloadLoader
from kubeforge.models.manifest import RenderResult
from kubeforge.utils.logging import setup_logging
from kubeforge.utils.serialization import dump_manifests


logger = logging.getLogger(__name__)

console = Console()
stderr_console = Console(stderr=True)

# Errors reported to the user instead of crashing
USER_ERRORS = (ManifestError, ValidationError, YAMLError, FileNotFoundError)


def _build_compiler(loader: WorkloadLoader, persist: bool = True) -> Compiler:
    """Load configuration and build a compiler from it."""
    config = loader.load_config()
    setup_logging(config.log_level)

    if persist:
        store = FileIdentifierStore(Path(config.state.path))
    else:
        store = MemoryIdentifierStore()

    return Compiler(config=config, store=store)


def _prepare(config_path: Optional[Path], persist: bool = True) -> Tuple[WorkloadLoader, Compiler]:
    loader = WorkloadLoader(config_path)
    return loader, _build_compiler(loader, persist)


def _compile(
    loader: WorkloadLoader,
    compiler: Compiler,
    workload: Path,
    overrides: Optional[Path],
) -> RenderResult:
    spec = loader.load_workload(workload, overrides=overrides)
    return compiler.compile(spec)


def _write(text: str, output: Optional[Path]):
    """Write rendered text to a file or stdout."""
    if output is None:
        typer.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    stderr_console.print(f"[green]✓[/green] Wrote manifests to {escape(str(output))}")


def render_manifests(
    workload: Path,
    overrides: Optional[Path] = None,
    output: Optional[Path] = None,
    config_path: Optional[Path] = None,
):
    """Render a workload to multi-document YAML."""
    loader, compiler = _prepare(config_path)
    result = _compile(loader, compiler, workload, overrides)
    _write(dump_manifests(result.manifests()), output)


def validate_workload(
    workload: Path,
    overrides: Optional[Path] = None,
    config_path: Optional[Path] = None,
):
    """Validate a workload and list the resources it would produce."""
    loader, compiler = _prepare(config_path, persist=False)
    result = _compile(loader, compiler, workload, overrides)

    table = Table(title=f"Workload {result.namespace}/{result.name}")
    table.add_column("Kind", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Namespace")

    for manifest in result.manifests():
        table.add_row(
            manifest["kind"],
            manifest["metadata"]["name"],
            manifest["metadata"]["namespace"],
        )

    console.print(table)
    console.print(f"Checksum: [dim]{result.checksum}[/dim]")
    console.print("[green]✓[/green] Workload is valid")


def show_outputs(
    workload: Path,
    overrides: Optional[Path] = None,
    config_path: Optional[Path] = None,
):
    """Print the output summary as JSON."""
    loader, compiler = _prepare(config_path)
    result = _compile(loader, compiler, workload, overrides)
    typer.echo(json.dumps(result.outputs(), indent=2))


async def watch_and_render(
    workload: Path,
    overrides: Optional[Path] = None,
    output: Optional[Path] = None,
    config_path: Optional[Path] = None,
    stop_event=None,
):
    """Render once, then re-render whenever an input file changes."""
    loader = WorkloadLoader(config_path)

    def render_once():
        try:
            # Configuration is reloaded too, it is watched with the workload
            compiler = _build_compiler(loader)
            result = _compile(loader, compiler, workload, overrides)
            _write(dump_manifests(result.manifests()), output)
        except USER_ERRORS as e:
            # Keep watching so the next edit can fix the input
            logger.error(f"Render failed: {e}")
            stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")

    render_once()

    # Config, workload and overrides files read by the first render
    requested = [workload] + ([overrides] if overrides is not None else [])
    paths = list(dict.fromkeys(loader.watched_files + requested))
    logger.info(f"Watching {', '.join(str(p) for p in paths)} for changes")
    async for changes in awatch(*paths, stop_event=stop_event):
        if not loader.has_changed():
            logger.debug(f"Ignoring change without new content: {changes}")
            continue
        logger.info("Input changed, re-rendering")
        render_once()
