"""``noticeroute list [WINDOW]``: show the loaded reformattings.

Without an argument every rule is listed with its destination windows;
with one, only the rules whose destination is exactly that window.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from noticeroute.cli._runtime import console, get_reformatter


def list_cmd(
    ctx: typer.Context,
    window: Optional[str] = typer.Argument(
        None,
        help="Only show reformattings going to this window.",
    ),
) -> None:
    """List the active server notice reformattings."""
    reformatter = get_reformatter(ctx)
    table = reformatter.table

    if window:
        rules = table.rules_for_window(window)
        title = f"Active server notice reformattings to window {window}:"
    else:
        rules = list(table)
        title = "Active server notice reformattings:"

    console.print(f"[bold]{escape(title)}[/bold]")
    if rules:
        listing = Table()
        listing.add_column("Name", style="cyan")
        listing.add_column("Windows")
        listing.add_column("Level")
        listing.add_column("Options")
        for rule in rules:
            listing.add_row(
                rule.name,
                escape(rule.destinations),
                rule.message_level.value,
                " ".join(sorted(option.value for option in rule.options)),
            )
        console.print(listing)
    console.print(f"Total: {len(rules)}.")
