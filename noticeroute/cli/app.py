"""Main Typer application: registers every subcommand from one table.

Entry point: ``noticeroute`` (configured via pyproject.toml console scripts).

Commands: list, help, intro, create, inject, update, replay.  An unknown
subcommand prints the usage line instead of failing.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from typer.core import TyperGroup

from noticeroute.cli._runtime import configure_logging, console
from noticeroute.cli.commands.create_cmd import create_cmd
from noticeroute.cli.commands.help_cmd import help_cmd, intro_cmd
from noticeroute.cli.commands.inject_cmd import inject_cmd
from noticeroute.cli.commands.list_cmd import list_cmd
from noticeroute.cli.commands.replay_cmd import replay_cmd
from noticeroute.cli.commands.update_cmd import update_cmd
from noticeroute.config import ReformatConfig


class ReformatCommand(str, Enum):
    """The subcommands of ``noticeroute``."""

    LIST = "list"
    HELP = "help"
    INTRO = "intro"
    CREATE = "create"
    INJECT = "inject"
    UPDATE = "update"
    REPLAY = "replay"


_USAGE_COMMAND = "usage"
USAGE = f"Use noticeroute ({'|'.join(command.value for command in ReformatCommand)})."

_COMMANDS: dict[ReformatCommand, tuple[Callable[..., None], str]] = {
    ReformatCommand.LIST: (list_cmd, "List reformattings, optionally only those for one window."),
    ReformatCommand.HELP: (help_cmd, "Show a short help text."),
    ReformatCommand.INTRO: (intro_cmd, "Show an introduction to server notice reformatting."),
    ReformatCommand.CREATE: (create_cmd, "Create all windows necessary for the output."),
    ReformatCommand.INJECT: (inject_cmd, "Fake a server notice for testing."),
    ReformatCommand.UPDATE: (update_cmd, "Download the data file again and reload it."),
    ReformatCommand.REPLAY: (replay_cmd, "Replay raw IRC lines through the reformattings."),
}


class ReformatGroup(TyperGroup):
    """Command group that answers unknown subcommands with the usage line."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and args[0] not in self.commands:
            return _USAGE_COMMAND, self.get_command(ctx, _USAGE_COMMAND), []
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="noticeroute",
    help="noticeroute: reformat IRC server notices and route them to windows.",
    cls=ReformatGroup,
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

for _command, (_handler, _help) in _COMMANDS.items():
    app.command(name=_command.value, help=_help)(_handler)


@app.command(name=_USAGE_COMMAND, hidden=True)
def usage_cmd() -> None:
    """Print the one-line usage summary."""
    console.print(USAGE, markup=False)


@app.callback()
def main_callback(
    ctx: typer.Context,
    datafile: Optional[Path] = typer.Option(
        None, "--datafile", "-d", help="Path to the rule data file."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory holding the window log files."
    ),
    multinetwork: Optional[bool] = typer.Option(
        None,
        "--multinetwork/--single-network",
        help="Prefer '<network>_<window>' windows over plain window names.",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Load settings from NOTICEROUTE_* variables and command-line overrides."""
    overrides = {
        "datafile_path": datafile,
        "output_dir": output_dir,
        "multinetwork": multinetwork,
        "log_level": log_level,
    }
    try:
        settings = ReformatConfig(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    configure_logging(settings.log_level)
    ctx.obj = settings


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
