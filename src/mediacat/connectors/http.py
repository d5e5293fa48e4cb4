"""HTTP connector.

Accepts the same `<verb> <key>` requests over HTTP:

    POST /request        body: "search photo1"
    GET  /{verb}/{key}   e.g. GET /search/photo1

The response body is the dispatcher's text, possibly empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import web

from mediacat.connectors.base import IncomingRequest

if TYPE_CHECKING:
    from mediacat.config import HttpConfig
    from mediacat.connectors.base import RequestHandler

logger = logging.getLogger(__name__)


class HTTPConnector:
    """aiohttp front end for the dispatcher."""

    def __init__(self, config: HttpConfig) -> None:
        self._config = config
        self._handler: RequestHandler | None = None
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    @property
    def name(self) -> str:
        return "http"

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/request", self._handle_post)
        app.router.add_get("/{verb}/{key}", self._handle_get)
        return app

    async def start(self, handler: RequestHandler) -> None:
        self._handler = handler
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await self._site.start()
        logger.info("HTTP server listening on %s:%d", self._config.host, self._config.port)

    async def _handle_post(self, request: web.Request) -> web.Response:
        line = (await request.text()).strip()
        return await self._dispatch(line, request)

    async def _handle_get(self, request: web.Request) -> web.Response:
        line = f"{request.match_info['verb']} {request.match_info['key']}"
        return await self._dispatch(line, request)

    async def _dispatch(self, line: str, request: web.Request) -> web.Response:
        if self._handler is None:
            return web.Response(status=503, text="")
        msg = IncomingRequest(
            text=line,
            client_id=request.remote or "",
            connector_name=self.name,
        )
        try:
            response = await self._handler(msg)
        except Exception as e:
            logger.error("Error processing request %r: %s", line, e)
            return web.Response(text="")
        return web.Response(text=response.text)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("HTTP server stopped")
