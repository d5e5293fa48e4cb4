"""Line-protocol client for a running `python -m mediacat serve`.

Sends `<verb> <name>` lines to the TCP server and reads one response line
back per request. The server folds multi-line renderings into one line with
a separator (`;` by default); the client turns it back into newlines.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Callable

from mediacat.core import SEARCH_VERB

logger = logging.getLogger(__name__)

PLAY_VERB = "play"


def parse_address(text: str | None, default_host: str, default_port: int) -> tuple[str, int]:
    """Split `HOST:PORT`, `HOST` or `:PORT` into (host, port)."""
    if not text:
        return default_host, default_port
    host, sep, port = text.rpartition(":")
    if not sep:
        return text, default_port
    return host or default_host, int(port)


class CatalogClient:
    """One connection to the catalog server. Requests are sent one at a time."""

    def __init__(
        self, host: str = "127.0.0.1", port: int = 3331, newline_replacement: str = ";"
    ) -> None:
        self.host = host
        self.port = port
        self.newline_replacement = newline_replacement
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        logger.info("Connected to %s:%d", self.host, self.port)

    async def close(self) -> None:
        if self._writer is None:
            return
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except ConnectionError:
            pass
        self._reader = self._writer = None
        logger.info("Disconnected from %s:%d", self.host, self.port)

    async def __aenter__(self) -> CatalogClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def send(self, line: str) -> str:
        """Send one request line and return the unfolded response text."""
        if self._writer is None or self._reader is None:
            raise ConnectionError("Not connected. Call connect() first.")
        async with self._lock:
            self._writer.write((line.strip() + "\n").encode("utf-8"))
            await self._writer.drain()
            raw = await self._reader.readline()
        if not raw:
            raise ConnectionError(f"{self.host}:{self.port} closed the connection")
        text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        logger.debug("response for %r: %r", line, text)
        if not text:
            return ""
        return text.replace(self.newline_replacement, "\n") + "\n"

    async def search(self, name: str) -> str:
        return await self.send(f"{SEARCH_VERB} {name}")

    async def play(self, name: str) -> None:
        await self.send(f"{PLAY_VERB} {name}")


# ── Interactive mode ─────────────────────────────────────────


def _read_input() -> str | None:
    sys.stdout.write("\nmediacat> ")
    sys.stdout.flush()
    raw = sys.stdin.buffer.readline()
    if not raw:
        return None
    return raw.decode("utf-8", errors="replace").rstrip("\n")


async def run_repl(
    client: CatalogClient, read_input: Callable[[], str | None] = _read_input
) -> None:
    """Prompt for `search <name>` / `play <name>` until exit or EOF."""
    loop = asyncio.get_running_loop()

    print(f"mediacat client for {client.host}:{client.port}")
    print("(commands: search <name> | play <name> | exit)")
    print("-" * 48)

    while True:
        line = await loop.run_in_executor(None, read_input)
        if line is None or line.strip().lower() in ("exit", "quit"):
            break
        text = line.strip()
        if not text:
            continue

        response = await client.send(text)
        if response:
            print(response, end="")
        else:
            print("(no output)")
