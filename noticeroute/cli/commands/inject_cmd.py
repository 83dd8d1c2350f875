"""``noticeroute inject NOTICE``: fake a server notice for testing.

The text is wrapped as ``NOTICE <nick> :<text>`` coming from the server's
own address, then run through the rules like any real notice.
"""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.markup import escape

from noticeroute.cli._runtime import console, get_reformatter, print_dispatch_result
from noticeroute.routing.dispatcher import NOTICE_PREFIX


def inject_cmd(
    ctx: typer.Context,
    text: Optional[List[str]] = typer.Argument(
        None,
        help="Notice text. Quote it when it contains '--'.",
    ),
    prefix: bool = typer.Option(
        False,
        "--prefix",
        "-p",
        help="Prepend the '*** Notice -- ' server notice prefix.",
    ),
    network: Optional[str] = typer.Option(
        None,
        "--network",
        "-n",
        help="Network tag the notice arrives on.",
    ),
) -> None:
    """Inject a server notice. Mostly used for testing reformattings."""
    notice = " ".join(text or [])
    if not notice:
        console.print(
            "Injects a server notice. Mostly used for testing purposes. "
            "Use [bold]noticeroute inject NOTICE[/bold]."
        )
        return
    if prefix and not notice.startswith(NOTICE_PREFIX):
        notice = NOTICE_PREFIX + notice

    reformatter = get_reformatter(ctx)
    server = reformatter.server_context()
    if network:
        server = server.model_copy(update={"tag": network})

    console.print(f"Faking a server notice ({escape(notice)})")
    print_dispatch_result(reformatter.inject(notice, server))
