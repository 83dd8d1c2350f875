"""``noticeroute help`` and ``noticeroute intro``: usage and introduction."""

from __future__ import annotations

from typing import Optional

import typer
from rich.panel import Panel

from noticeroute.cli._runtime import console

HELP_TEXT = "\n".join([
    "[bold cyan]Server notice reformatting[/bold cyan]",
    "Makes server notices friendlier and easier to manage by rewriting them",
    "and sorting them into separate windows.",
    "",
    "[bold]COMMANDS[/bold]",
    "",
    "[bold]noticeroute intro[/bold]",
    "  Shows an introduction to reformatting.",
    "[bold]noticeroute list[/bold] [WINDOW]",
    "  Shows all server notice reformattings. If a window name is given,",
    "  shows only the reformattings going to that window.",
    "[bold]noticeroute create[/bold]",
    "  Creates all windows necessary for the output.",
    "[bold]noticeroute inject[/bold] NOTICE",
    "  Fakes a notice from the server for testing. The text is sent as",
    "  NOTICE <nick> :NOTICE, so include the '*** Notice -- ' prefix or pass -p.",
    "[bold]noticeroute replay[/bold] FILE",
    "  Runs raw IRC lines from FILE (or - for stdin) through the rules.",
    "[bold]noticeroute update[/bold]",
    "  Downloads the data file again and reloads it.",
])

INTRO_TEXT = "\n".join([
    "[bold cyan]Server notice reformatting[/bold cyan]: an introduction.",
    "",
    "Each server notice is matched against a list of regular expressions.",
    "Whenever a notice matches, the captured tokens are passed to a display",
    "format specific to that expression and the result is printed to the",
    "windows the reformatting names.",
    "",
    "The reformattings are stored in the data file (NOTICEROUTE_DATAFILE_PATH).",
    "Each one has 4 lines:",
    "- name \\[options]",
    "- regular expression",
    "- reformatting format ($0 is the network tag, $1... the captures)",
    "- target windows [MSG|HILIGHT|NONE]",
    "",
    "Options are SERVERNAME, which passes the originating server as $1, and",
    "CONTINUEMATCH, which keeps matching later reformattings. A target line",
    "starting with 'TAG: ' only applies on that network. The target 'active'",
    "is the focused window and 'devnull' silently discards the notice.",
    "",
    "Every named window must exist, or the output lands in the default window.",
    "Use [bold]noticeroute create[/bold] to create all missing windows at once.",
])


def help_cmd(
    topic: Optional[str] = typer.Argument(None, help="Use 'intro' for the introduction."),
) -> None:
    """Show a short help text."""
    if topic == "intro":
        intro_cmd()
        return
    console.print(Panel(HELP_TEXT, title="[bold]noticeroute[/bold]", border_style="cyan"))


def intro_cmd() -> None:
    """Show an introduction to server notice reformatting."""
    console.print(Panel(INTRO_TEXT, title="[bold]noticeroute[/bold]", border_style="cyan"))
