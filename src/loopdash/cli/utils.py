"""
Shared CLI utilities.
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from loopdash._version import get_version
from loopdash.core.config import DashboardConfig, find_config, load_config
from loopdash.core.modes import Mode, resolve_mode
from loopdash.layout_engine.persistence import JsonFileKeyValueStore
from loopdash.layout_engine.store import LayoutStore
from loopdash.layout_engine.types import MutationResult, MutationStatus
from loopdash.registry import default_registry

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class CliState:
    """Options shared by every command, set by the app callback."""

    config: DashboardConfig
    state_file: Path
    mode: Mode

    def open_store(self) -> LayoutStore:
        return LayoutStore(
            JsonFileKeyValueStore(self.state_file),
            default_registry(),
            config=self.config,
        )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def build_state(
    config_path: Path | None, state_file: Path | None, mode: str | None
) -> CliState:
    """Resolve config file, state file and mode from the global options."""
    path = config_path or find_config(Path.cwd())
    config = load_config(path) if path else DashboardConfig()
    return CliState(
        config=config,
        state_file=state_file or config.storage.path,
        mode=resolve_mode(mode or config.default_mode),
    )


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"loopdash {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


_STATUS_STYLES = {
    MutationStatus.DUPLICATE: "yellow",
    MutationStatus.NOT_FOUND: "red",
    MutationStatus.UNCHANGED: "dim",
}


def report(result: MutationResult, message: str) -> None:
    """Print a mutation outcome and exit non-zero when nothing was found."""
    style = _STATUS_STYLES.get(result.status, "green")
    console.print(f"[{style}]{escape(message)}[/{style}]")
    if result.warning:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(result.warning)}")
    if result.status is MutationStatus.NOT_FOUND:
        raise typer.Exit(code=1)


__all__ = [
    "CliState",
    "build_state",
    "configure_logging",
    "console",
    "err_console",
    "report",
    "version_callback",
]
