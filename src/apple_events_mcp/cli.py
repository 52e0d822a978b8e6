"""apple-events-mcp CLI entrypoint.

Without a subcommand the server runs: over stdio by default, or over HTTP
with ``--http`` (which requires a config file).  stdout belongs to the stdio
protocol, so every log line goes to stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler

from apple_events_mcp import __version__
from apple_events_mcp.config import DEFAULT_CONFIG_PATH, ConfigError, ConfigLoader

if TYPE_CHECKING:
    from apple_events_mcp.config import ServerConfig

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="apple-events-mcp")
@click.option("--http", "use_http", is_flag=True, help="Serve over HTTP instead of stdio.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Config file for HTTP mode.",
)
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Persist reminders and events to this JSON file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Export trace spans to stderr.")
@click.option("--otlp-endpoint", default=None, help="Export trace spans via OTLP/gRPC.")
@click.pass_context
def main(
    ctx: click.Context,
    use_http: bool,
    config_path: Path,
    store_path: Path | None,
    verbose: bool,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Apple Events MCP — reminders and calendar tools over MCP."""
    if ctx.invoked_subcommand is not None:
        return

    configure_logging(verbose)

    if telemetry or otlp_endpoint:
        from apple_events_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=telemetry, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            logger.error("%s", exc)
            sys.exit(1)

    config = None
    if use_http:
        try:
            config = ConfigLoader(config_path).load()
        except ConfigError as exc:
            logger.error("Failed to load config: %s", exc.message)
            sys.exit(1)
        if store_path is None:
            store_path = config.store_path

    try:
        asyncio.run(serve(config=config, store_path=store_path))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


async def serve(*, config: ServerConfig | None = None, store_path: Path | None = None) -> None:
    """Request backend access, then run the selected transport until it stops."""
    from apple_events_mcp.backend.errors import BackendError
    from apple_events_mcp.backend.memory import InMemoryEventStore
    from apple_events_mcp.server.dispatcher import MCPDispatcher
    from apple_events_mcp.server.transport import HTTPTransport, StdioTransport

    try:
        backend = InMemoryEventStore(path=store_path)
    except BackendError as exc:
        logger.error("Failed to open event store: %s", exc.message)
        sys.exit(1)

    try:
        await backend.request_access()
    except BackendError as exc:
        logger.error("Failed to get access: %s", exc.message)
        sys.exit(1)

    dispatcher = MCPDispatcher(backend)

    if config is not None:
        await HTTPTransport(
            dispatcher, host=config.host, port=config.port, api_key=config.api_key
        ).run()
    else:
        await StdioTransport(dispatcher).run()


# Register subcommands
from apple_events_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
