"""Shared CLI output formatters."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from apple_events_mcp.protocol.models import ToolDescriptor  # noqa: TC001

console = Console()


def print_tools_table(tools: list[ToolDescriptor]) -> None:
    """Pretty-print the tool catalog as a table."""
    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Optional")
    table.add_column("Description")

    for tool in tools:
        required = tool.input_schema.required
        optional = [p for p in tool.input_schema.properties if p not in required]
        table.add_row(
            tool.name,
            ", ".join(required) or "-",
            ", ".join(optional) or "-",
            _truncate(tool.description),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
