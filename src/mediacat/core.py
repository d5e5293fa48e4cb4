"""Request dispatcher: the hub between transports and the catalog.

Responsibilities:
1. Receive request lines from any connector (IncomingRequest)
2. Lane queue: serialize requests per client so one connection never has
   two requests in flight
3. Parse `<verb> <key>` and call into the catalog Manager
4. Turn the outcome into a response string; catalog failures are logged
   and degrade to an empty response
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mediacat.catalog.errors import CatalogError
from mediacat.connectors.base import IncomingRequest

if TYPE_CHECKING:
    from mediacat.catalog.manager import Manager
    from mediacat.connectors.base import Connector

logger = logging.getLogger(__name__)

SEARCH_VERB = "search"


@dataclass
class CatalogResponse:
    """Response handed back to the originating transport. May be empty."""

    text: str = ""


def parse_request(line: str) -> tuple[str, str]:
    """Split a request line into (verb, key). Missing tokens are empty."""
    tokens = line.split()
    verb = tokens[0] if tokens else ""
    key = tokens[1] if len(tokens) > 1 else ""
    return verb, key


class Dispatcher:
    """Routes request lines from connectors to the catalog."""

    def __init__(self, manager: Manager) -> None:
        self.manager = manager
        self._connectors: list[Connector] = []
        self._lane_locks: dict[str, asyncio.Lock] = {}  # per-client serialization
        self._lane_users: dict[str, int] = {}  # in-flight requests per lane

    # ── Connector management ─────────────────────────────────

    def add_connector(self, connector: Connector) -> None:
        self._connectors.append(connector)
        logger.info("Registered connector: %s", connector.name)

    # ── Lane Queue (per-client serialization) ────────────────

    def _acquire_lane(self, client_id: str) -> asyncio.Lock:
        if client_id not in self._lane_locks:
            self._lane_locks[client_id] = asyncio.Lock()
        self._lane_users[client_id] = self._lane_users.get(client_id, 0) + 1
        return self._lane_locks[client_id]

    def _release_lane(self, client_id: str) -> None:
        # A lane lives only while it has requests in flight or queued.
        self._lane_users[client_id] -= 1
        if not self._lane_users[client_id]:
            del self._lane_users[client_id]
            del self._lane_locks[client_id]

    # ── Request handling (the core loop) ─────────────────────

    async def handle_request(self, msg: IncomingRequest) -> CatalogResponse:
        """Process one request. This is the entry point for all connectors."""
        lock = self._acquire_lane(msg.client_id)
        try:
            async with lock:
                return await self._process(msg)
        finally:
            self._release_lane(msg.client_id)

    async def _process(self, msg: IncomingRequest) -> CatalogResponse:
        logger.info("request [%s/%s]: %s", msg.connector_name, msg.client_id, msg.text)
        # Playing may block on the OS launcher; keep it off the event loop.
        text = await asyncio.to_thread(self.handle_line, msg.text)

        logger.debug("response [%s]: %r", msg.client_id, text)
        return CatalogResponse(text=text)

    def handle_line(self, line: str) -> str:
        """Route one request line to the catalog and return the response text.

        Shared by `handle_request` and by synchronous local callers.
        """
        verb, key = parse_request(line)
        if verb == SEARCH_VERB:
            return self.search(key)
        self.play(key)
        return ""

    def search(self, key: str) -> str:
        buffer = io.StringIO()
        try:
            self.manager.search_and_display(key, buffer)
        except CatalogError as e:
            logger.warning("search %r failed: %s", key, e)
            return ""
        return buffer.getvalue()

    def play(self, key: str) -> None:
        try:
            self.manager.play_media(key)
        except CatalogError as e:
            logger.warning("play %r failed: %s", key, e)

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        """Start all connectors (each listens for requests)."""
        if not self._connectors:
            raise RuntimeError("No connectors registered. Call add_connector() first.")

        await asyncio.gather(*(connector.start(self.handle_request) for connector in self._connectors))

    async def stop(self) -> None:
        """Gracefully stop all connectors."""
        for connector in self._connectors:
            await connector.stop()
