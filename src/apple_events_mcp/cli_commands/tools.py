"""``apple-events-mcp tools`` — list the tools the server exposes."""

from __future__ import annotations

import json

import click

from apple_events_mcp.cli_commands._output import console, print_tools_table
from apple_events_mcp.tools import registry


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def tools(as_json: bool) -> None:
    """List the tool catalog."""
    catalog = list(registry.describe())

    if as_json:
        payload = [tool.model_dump(by_alias=True) for tool in catalog]
        console.print_json(json.dumps(payload))
        return

    print_tools_table(catalog)
