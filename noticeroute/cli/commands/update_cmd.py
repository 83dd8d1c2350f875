"""``noticeroute update``: fetch the data file again and reload it."""

from __future__ import annotations

import typer
from rich.markup import escape

from noticeroute.cli._runtime import console, get_reformatter, print_load_report
from noticeroute.errors import DatafileDownloadError


def update_cmd(ctx: typer.Context) -> None:
    """Download the rule data file and reload the reformattings."""
    reformatter = get_reformatter(ctx, bootstrap=False)
    try:
        report = reformatter.update()
    except DatafileDownloadError as exc:
        console.print(f"[bold red]Update failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    print_load_report(report)
    for warning in reformatter.check_windows():
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
