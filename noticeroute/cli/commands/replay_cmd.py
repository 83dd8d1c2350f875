"""``noticeroute replay FILE``: run recorded IRC lines through the rules.

Each line is a raw protocol line such as
``:irc.example.net NOTICE oper :*** Notice -- ...``.  Lines without a
prefix are treated as coming from the configured server address.
"""

from __future__ import annotations

from typing import Optional

import typer

from noticeroute.cli._runtime import console, get_reformatter


def replay_cmd(
    ctx: typer.Context,
    source: typer.FileText = typer.Argument(
        ...,
        help="File of raw IRC lines, or - for stdin.",
    ),
    network: Optional[str] = typer.Option(
        None,
        "--network",
        "-n",
        help="Network tag the lines arrive on.",
    ),
    server_address: Optional[str] = typer.Option(
        None,
        "--server",
        "-s",
        help="Address of the server the lines were received from.",
    ),
) -> None:
    """Replay raw IRC lines through the reformattings."""
    reformatter = get_reformatter(ctx)
    server = reformatter.server_context()
    updates = {}
    if network:
        updates["tag"] = network
    if server_address:
        updates["real_address"] = server_address
    if updates:
        server = server.model_copy(update=updates)

    results = reformatter.replay(source, server)
    consumed = sum(1 for result in results if result.consumed)
    printed = sum(len(result.deliveries) for result in results)
    console.print(
        f"Replayed {len(results)} lines: {consumed} consumed, {printed} lines printed."
    )
