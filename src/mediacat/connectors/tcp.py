"""Line-protocol TCP connector.

Each request is one `\\n`-terminated line `<verb> <key>`; each response is
written back as one line. Clients talk to a single connection sequentially.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from mediacat.connectors.base import IncomingRequest

if TYPE_CHECKING:
    from mediacat.config import ServerConfig
    from mediacat.connectors.base import RequestHandler

logger = logging.getLogger(__name__)


class TCPConnector:
    """asyncio stream server speaking one request/response per line."""

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._handler: RequestHandler | None = None
        self._server: asyncio.AbstractServer | None = None
        self._writers: set[asyncio.StreamWriter] = set()

    @property
    def name(self) -> str:
        return "tcp"

    @property
    def port(self) -> int | None:
        """Bound port (useful when configured with port 0)."""
        if not self._server or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self, handler: RequestHandler) -> None:
        self._handler = handler
        self._server = await asyncio.start_server(
            self._handle_client, self._config.host, self._config.port
        )
        logger.info("TCP server listening on %s:%d", self._config.host, self.port)

    def _frame(self, text: str) -> bytes:
        line = text.rstrip("\n").replace("\n", self._config.newline_replacement)
        return (line + "\n").encode("utf-8")

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        peer = writer.get_extra_info("peername")
        client_id = f"{peer[0]}:{peer[1]}" if peer else str(id(writer))
        logger.info("Client connected: %s", client_id)
        self._writers.add(writer)

        try:
            while True:
                raw = await reader.readline()
                if not raw:
                    break
                msg = IncomingRequest(
                    text=raw.decode("utf-8", errors="replace").rstrip("\r\n"),
                    client_id=client_id,
                    connector_name=self.name,
                )
                try:
                    response = await self._handler(msg)
                    text = response.text
                except Exception as e:
                    logger.error("Error processing request %r from %s: %s", msg.text, client_id, e)
                    text = ""
                writer.write(self._frame(text))
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError, ValueError) as e:
            logger.debug("Client %s dropped: %s", client_id, e)
        finally:
            self._writers.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass
            logger.info("Client disconnected: %s", client_id)

    async def stop(self) -> None:
        if not self._server:
            return
        self._server.close()
        for writer in list(self._writers):
            writer.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("TCP server stopped")
