"""HTTP transport — one JSON-RPC message per ``POST /{api_key}/mcp``.

Routes:

* ``GET /health`` — unauthenticated liveness check.
* ``POST /{api_key}/mcp`` — the MCP endpoint.  The key in the path is
  checked before the body is read, so unauthenticated requests never reach
  the dispatcher.

Every other POST path answers ``404 {"error": "Not found"}``.
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

import uvicorn
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from apple_events_mcp.protocol.codec import PARSE_ERROR_BODY, encode_response
from apple_events_mcp.protocol.errors import PARSE_ERROR

if TYPE_CHECKING:
    from starlette.requests import Request

    from apple_events_mcp.server.dispatcher import MCPDispatcher

logger = logging.getLogger(__name__)

_JSON = "application/json"


def create_http_app(dispatcher: MCPDispatcher, api_key: str) -> Starlette:
    """Build the Starlette application serving *dispatcher*."""
    expected_key = api_key.encode()

    async def health(request: Request) -> Response:
        return JSONResponse({"status": "ok"})

    async def mcp_endpoint(request: Request) -> Response:
        segments = [s for s in request.url.path.split("/") if s]
        if len(segments) != 2 or segments[1] != "mcp":
            return JSONResponse({"error": "Not found"}, status_code=404)

        if not hmac.compare_digest(segments[0].encode(), expected_key):
            logger.warning("Rejected request with invalid API key from %s", _client(request))
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        content_type = request.headers.get("content-type", "")
        if _JSON not in content_type:
            return JSONResponse(
                {"error": "Content-Type must be application/json"}, status_code=415
            )

        body = await request.body()
        if not body:
            return Response(PARSE_ERROR_BODY, status_code=400, media_type=_JSON)

        response = await dispatcher.handle_message(body)
        if response is None:
            return Response(status_code=202)

        status_code = 200
        if response.error is not None and response.error.code == PARSE_ERROR:
            status_code = 400
        return Response(encode_response(response), status_code=status_code, media_type=_JSON)

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/{path:path}", mcp_endpoint, methods=["POST"]),
        ],
    )


class HTTPTransport:
    """Serve a dispatcher over HTTP with uvicorn."""

    def __init__(
        self,
        dispatcher: MCPDispatcher,
        *,
        host: str,
        port: int,
        api_key: str,
    ) -> None:
        self._host = host
        self._port = port
        self._api_key = api_key
        self.app = create_http_app(dispatcher, api_key)

    async def run(self) -> None:
        logger.info(
            "Apple Reminders MCP Server running on http://localhost:%d/%s/mcp",
            self._port,
            mask_key(self._api_key),
        )
        logger.info("Health check: http://localhost:%d/health", self._port)

        config = uvicorn.Config(
            self.app,
            host=self._host,
            port=self._port,
            log_level="warning",
            access_log=False,
        )
        server = uvicorn.Server(config)

        try:
            await server.serve()
        except Exception as exc:
            logger.exception("HTTP server error: %s", exc)
            raise


def mask_key(api_key: str) -> str:
    """Show only the first four characters of *api_key*."""
    if len(api_key) <= 4:
        return "****"
    return api_key[:4] + "*" * 8


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"
