"""Shared CLI plumbing: console, logging, and Reformatter construction."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from noticeroute.config import ReformatConfig
from noticeroute.core.loader import LoadReport
from noticeroute.core.reformatter import Reformatter
from noticeroute.models.notices import DispatchResult
from noticeroute.routing.sinks.local_file import FileHost

console = Console()


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_config(ctx: typer.Context) -> ReformatConfig:
    if isinstance(ctx.obj, ReformatConfig):
        return ctx.obj
    return ReformatConfig()


def get_reformatter(ctx: typer.Context, bootstrap: bool = True) -> Reformatter:
    """Build a Reformatter writing to the configured window directory.

    With *bootstrap*, the data file is fetched when missing and loaded.
    """
    settings = get_config(ctx)
    host = FileHost(
        settings.output_dir,
        default_window=settings.default_window,
        active_window=settings.active_window,
        console=console,
    )
    reformatter = Reformatter(host, settings)
    if bootstrap:
        reformatter.bootstrap()
    return reformatter


def print_load_report(report: LoadReport) -> None:
    console.print(f"Processed {report.loaded} server notice reformats from {escape(report.source)}.")
    for error in report.errors:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(error))}")


def print_dispatch_result(result: DispatchResult) -> None:
    if not result.consumed:
        console.print("[yellow]Not consumed:[/yellow] no reformatting applied.")
        return
    console.print(f"[green]Consumed[/green] by {', '.join(result.matched_rules)}.")
    for delivery in result.deliveries:
        console.print(
            f"  -> [cyan]{escape(delivery.window_name)}[/cyan] "
            f"({delivery.format_name}, {delivery.level.value})"
        )
