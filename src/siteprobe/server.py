"""HTTP API exposing ``POST /scan``.

Thin aiohttp.web layer over ``Scanner``: JSON in, ScanReport JSON out,
permissive CORS so a browser page on any origin can call it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
import json
import logging

import aiohttp
from aiohttp import web
from pydantic import BaseModel, Field, ValidationError

from siteprobe.core.errors import FetchError, InputError
from siteprobe.core.result import ScanRequest
from siteprobe.core.scanner import ScanConfig, Scanner
from siteprobe.http import AiohttpAdapter, HTTPClientProtocol

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,PUT,PATCH,POST,DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}

SCAN_CONFIG = web.AppKey("scan_config", ScanConfig)
HTTP_CLIENT = web.AppKey("http_client", object)


class ServerConfig(BaseModel):
    """Where the API listens."""

    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def cors_middleware(
    request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]
) -> web.StreamResponse:
    """Answer preflight requests and add CORS headers to every response."""
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=CORS_HEADERS)

    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


async def _read_json(request: web.Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


async def handle_scan(request: web.Request) -> web.Response:
    body = await _read_json(request)

    if not body.get("url"):
        return _error("URL is required.", 400)

    try:
        scan_request = ScanRequest.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        return _error(f"Invalid scan request: {first['msg']}", 400)

    client: HTTPClientProtocol = request.app[HTTP_CLIENT]
    try:
        async with Scanner(request.app[SCAN_CONFIG], client=client) as scanner:
            report = await scanner.scan(scan_request)
    except InputError as exc:
        return _error(str(exc), 400)
    except FetchError as exc:
        return _error(f"Failed to scan the URL. {exc}", 500)

    return web.json_response(report.to_wire())


def create_app(
    config: ScanConfig | None = None, client: HTTPClientProtocol | None = None
) -> web.Application:
    """Build the aiohttp application.

    Args:
        config: Scan configuration shared by all requests
        client: HTTP client for outgoing requests; when omitted one
            aiohttp session is opened for the lifetime of the app
    """
    app = web.Application(middlewares=[cors_middleware])
    app[SCAN_CONFIG] = config or ScanConfig()

    if client is not None:
        app[HTTP_CLIENT] = client
    else:
        app.cleanup_ctx.append(_client_session)

    app.router.add_post("/scan", handle_scan)
    return app


async def _client_session(app: web.Application) -> AsyncIterator[None]:
    headers = {"User-Agent": app[SCAN_CONFIG].user_agent}
    async with aiohttp.ClientSession(headers=headers) as session:
        app[HTTP_CLIENT] = AiohttpAdapter(session)
        yield


def run_server(server_config: ServerConfig, scan_config: ScanConfig | None = None) -> None:
    """Serve the API until interrupted."""
    logger.info("Security scanner running on http://localhost:%d", server_config.port)
    web.run_app(
        create_app(scan_config),
        host=server_config.host,
        port=server_config.port,
        print=None,
    )
