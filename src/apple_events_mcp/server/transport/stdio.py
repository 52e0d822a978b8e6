"""Stdio transport — newline-delimited JSON-RPC over stdin/stdout.

Each input line is one message.  Responses are written as a single line and
flushed immediately; stdout carries nothing else, so all logging goes to
stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from apple_events_mcp.server.dispatcher import MCPDispatcher

logger = logging.getLogger(__name__)


class StdioTransport:
    """Serve a dispatcher over a pair of binary streams (stdin/stdout by default)."""

    def __init__(
        self,
        dispatcher: MCPDispatcher,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer

    async def run(self) -> None:
        """Process messages one at a time until end of input."""
        logger.info("Serving MCP over stdio")
        while True:
            line = await asyncio.to_thread(self._stdin.readline)
            if not line:
                break

            record = line.strip()
            if not record:
                continue
            try:
                record.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Skipping input line that is not valid UTF-8")
                continue

            response = await self._dispatcher.handle(record)
            if response is not None:
                self._write(response)

        logger.info("stdin closed, stopping")

    def _write(self, payload: bytes) -> None:
        self._stdout.write(payload + b"\n")
        self._stdout.flush()
