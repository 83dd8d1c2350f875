"""``noticeroute create``: create every window the rules send to."""

from __future__ import annotations

import typer

from noticeroute.cli._runtime import console, get_reformatter


def create_cmd(ctx: typer.Context) -> None:
    """Create the missing output windows."""
    reformatter = get_reformatter(ctx)
    missing = reformatter.missing_window_names()
    if not missing:
        console.print("All necessary windows are present. Not creating any extra.")
        return

    console.print(f"Creating the missing windows: {' '.join(missing)}.")
    for window in reformatter.create_missing_windows():
        console.print(f"Created [cyan]{window.name}[/cyan].")
