"""noticeroute CLI: Typer-based command-line interface.

Provides the ``noticeroute`` command with subcommands for listing rules,
creating output windows, injecting and replaying notices, and updating the
rule data file.

All output uses Rich for formatted terminal display.
"""
