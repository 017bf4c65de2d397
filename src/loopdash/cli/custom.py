"""
Custom per-mode layout commands.

Commands:
- custom save: Store the current layout as a mode's template
- custom clear: Forget one mode's template, or all of them
- custom list: Show modes with a saved template
"""

from __future__ import annotations

from typing import Annotated

import typer

from loopdash.cli.utils import CliState, console, err_console
from loopdash.core.modes import resolve_mode

custom_app = typer.Typer(help="Manage custom per-mode layouts", no_args_is_help=True)


@custom_app.command("save")
def save_command(
    ctx: typer.Context,
    mode: Annotated[str | None, typer.Argument(help="Mode (defaults to --mode)")] = None,
) -> None:
    """Save the current layout as the template for a mode."""
    state: CliState = ctx.obj
    target = resolve_mode(mode) if mode else state.mode
    if not state.open_store().save_custom_layout(target):
        err_console.print(f"[red]Could not save custom layout for {target}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Saved custom layout for {target}")


@custom_app.command("clear")
def clear_command(
    ctx: typer.Context,
    mode: Annotated[str | None, typer.Argument(help="Mode to clear")] = None,
    all_modes: Annotated[bool, typer.Option("--all", help="Clear every mode")] = False,
) -> None:
    """Clear a custom layout so the built-in template applies again."""
    state: CliState = ctx.obj
    store = state.open_store()
    if all_modes:
        store.clear_all_custom_layouts()
        console.print("All custom layouts cleared")
        return

    target = resolve_mode(mode) if mode else state.mode
    if store.clear_custom_layout(target):
        console.print(f"Custom layout for {target} cleared")
    else:
        console.print(f"No custom layout saved for {target}")


@custom_app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List modes that have a saved custom layout."""
    state: CliState = ctx.obj
    saved = state.open_store().custom_modes()
    if not saved:
        console.print("No custom layouts")
        return
    for mode in saved:
        console.print(str(mode))
