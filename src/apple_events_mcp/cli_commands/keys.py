"""``apple-events-mcp generate-key`` — mint an API key for HTTP mode."""

from __future__ import annotations

import click

from apple_events_mcp.config import generate_api_key


@click.command("generate-key")
def generate_key() -> None:
    """Print a fresh random API key."""
    click.echo(generate_api_key())
