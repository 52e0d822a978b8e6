"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from apple_events_mcp.cli_commands.keys import generate_key
    from apple_events_mcp.cli_commands.tools import tools

    cli.add_command(tools)
    cli.add_command(generate_key)
