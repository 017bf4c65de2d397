"""
Loopdash CLI.

Inspect and edit the persisted dashboard layout from the terminal.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from loopdash.cli.custom import custom_app
from loopdash.cli.utils import (
    CliState,
    build_state,
    configure_logging,
    console,
    err_console,
    report,
    version_callback,
)
from loopdash.core.errors import ConfigError
from loopdash.core.modes import MODES
from loopdash.layout_engine.breakpoints import classify, columns_for, derive_breakpoint_layout
from loopdash.layout_engine.placeholder import find_placeholder_slot
from loopdash.layout_engine.placement import find_overlaps
from loopdash.layout_engine.types import MutationStatus
from loopdash.registry import default_registry

app = typer.Typer(
    help="Loopdash dashboard layout engine",
    no_args_is_help=True,
)
app.add_typer(custom_app, name="custom")


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to loopdash.toml (searched upwards by default)"),
    ] = None,
    state_file: Annotated[
        Path | None,
        typer.Option("--state-file", "-s", envvar="LOOPDASH_STATE", help="Layout state file"),
    ] = None,
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", help="Dashboard mode for defaults and resets")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """Manage the dashboard layout."""
    configure_logging(verbose)
    try:
        ctx.obj = build_state(config, state_file, mode)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _state(ctx: typer.Context) -> CliState:
    state: CliState = ctx.obj
    return state


# =============================================================================
# Read commands
# =============================================================================


@app.command()
def show(
    ctx: typer.Context,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the current layout."""
    state = _state(ctx)
    layout = state.open_store().get_layout(state.mode)

    if output_json:
        typer.echo(json.dumps([w.model_dump(by_alias=True) for w in layout], indent=2))
        return

    table = Table(title=f"Layout ({state.mode})")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    for column in ("x", "y", "w", "h"):
        table.add_column(column, justify="right")
    for widget in layout:
        table.add_row(
            widget.id, widget.type, str(widget.x), str(widget.y), str(widget.w), str(widget.h)
        )
    console.print(table)

    for first, second in find_overlaps(layout):
        err_console.print(f"[yellow]Overlap:[/yellow] {first} / {second}")


@app.command()
def render(
    ctx: typer.Context,
    width: Annotated[int, typer.Option("--width", "-w", help="Viewport width in pixels")] = 1280,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show how the layout is drawn at a viewport width."""
    state = _state(ctx)
    if width < 0:
        err_console.print("[red]Width must be non-negative[/red]")
        raise typer.Exit(code=1)

    breakpoint = classify(width, config=state.config.breakpoints)
    cols = columns_for(breakpoint, config=state.config.breakpoints)
    cells = derive_breakpoint_layout(
        state.open_store().get_layout(state.mode), breakpoint, config=state.config.breakpoints
    )

    if output_json:
        payload = {
            "breakpoint": str(breakpoint),
            "columns": cols,
            "cells": [cell.model_dump() for cell in cells],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"{breakpoint} ({cols} columns, {width}px)")
    table.add_column("Widget", style="cyan")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("span", justify="right")
    table.add_column("h", justify="right")
    table.add_column("compact")
    for cell in cells:
        table.add_row(
            cell.widget_id,
            str(cell.x),
            str(cell.y),
            str(cell.span),
            str(cell.h),
            "yes" if cell.compact else "",
        )
    console.print(table)


@app.command()
def widgets(
    ctx: typer.Context,
    available: Annotated[
        bool, typer.Option("--available", "-a", help="Only widgets not on the board")
    ] = False,
) -> None:
    """List registered widget types."""
    state = _state(ctx)
    registry = default_registry()
    types = (
        set(state.open_store().available_widget_types(state.mode))
        if available
        else set(registry.types())
    )

    table = Table(title="Widgets")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Default", justify="right")
    table.add_column("Full width")
    for spec in registry:
        if spec.type not in types:
            continue
        table.add_row(
            spec.type,
            spec.name,
            f"{spec.default_size.w}x{spec.default_size.h}",
            "yes" if state.config.grid.is_full_width(spec.type) else "",
        )
    console.print(table)


@app.command()
def modes() -> None:
    """List dashboard modes."""
    table = Table(title="Modes")
    table.add_column("Mode", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    for info in MODES.values():
        table.add_row(info.id.value, info.name, info.description)
    console.print(table)


@app.command()
def placeholder(ctx: typer.Context) -> None:
    """Show where the add-widget tile goes."""
    state = _state(ctx)
    slot = find_placeholder_slot(
        state.open_store().get_layout(state.mode), config=state.config.grid
    )
    if slot is None:
        console.print("No half-empty row")
        return
    console.print(f"x={slot.x} y={slot.y} w={slot.w} h={slot.h}")


# =============================================================================
# Mutating commands
# =============================================================================


@app.command()
def add(
    ctx: typer.Context,
    widget_type: Annotated[str, typer.Argument(help="Widget type to add")],
) -> None:
    """Add a widget; it is placed automatically."""
    state = _state(ctx)
    result = state.open_store().add_widget(widget_type, mode=state.mode)
    if result.widget is not None:
        w = result.widget
        message = f"Added {w.id} at x={w.x} y={w.y} w={w.w} h={w.h}"
    elif result.status is MutationStatus.DUPLICATE:
        message = f"{widget_type} is already on the dashboard"
    else:
        message = f"Unknown widget type: {widget_type}"
    report(result, message)


@app.command()
def remove(
    ctx: typer.Context,
    widget_id: Annotated[str, typer.Argument(help="Widget id to remove")],
) -> None:
    """Remove a widget by id."""
    state = _state(ctx)
    result = state.open_store().remove_widget(widget_id, mode=state.mode)
    message = f"Removed {widget_id}" if result.changed else f"No widget with id {widget_id}"
    report(result, message)


@app.command()
def move(
    ctx: typer.Context,
    widget_id: Annotated[str, typer.Argument(help="Widget id to move")],
    x: Annotated[int, typer.Argument(help="Target column")],
    y: Annotated[int, typer.Argument(help="Target row")],
) -> None:
    """Move a widget. Overlaps are reported, not prevented."""
    state = _state(ctx)
    result = state.open_store().move_widget(widget_id, x, y, mode=state.mode)
    if result.widget is not None:
        message = f"Moved {widget_id} to x={result.widget.x} y={result.widget.y}"
    elif result.status is MutationStatus.UNCHANGED:
        message = f"{widget_id} already at x={x} y={y}"
    else:
        message = f"No widget with id {widget_id}"
    report(result, message)
    for first, second in find_overlaps(result.layout):
        err_console.print(f"[yellow]Overlap:[/yellow] {first} / {second}")


@app.command()
def reset(ctx: typer.Context) -> None:
    """Reset the layout to the mode's default template."""
    state = _state(ctx)
    result = state.open_store().reset_layout(state.mode)
    report(result, f"Layout reset to {state.mode} template ({len(result.layout)} widgets)")


@app.command()
def cleanup(ctx: typer.Context) -> None:
    """Remove duplicate widgets, keeping the first of each type."""
    state = _state(ctx)
    store = state.open_store()
    before = len(store.get_layout(state.mode))
    result = store.cleanup(state.mode)
    removed = before - len(result.layout)
    report(result, f"Removed {removed} duplicate widget(s)" if removed else "No duplicates")


def main() -> None:
    app()


__all__ = ["app", "main"]
