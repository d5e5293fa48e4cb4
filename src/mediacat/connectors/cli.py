"""Local REPL connector for browsing a catalog from a terminal."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from mediacat.connectors.base import IncomingRequest

if TYPE_CHECKING:
    from mediacat.connectors.base import RequestHandler
    from mediacat.core import CatalogResponse

logger = logging.getLogger(__name__)

_CLI_CLIENT_ID = "cli"


class CLIConnector:
    """Interactive REPL connector reading request lines from stdin."""

    def __init__(self) -> None:
        self._running = False

    @property
    def name(self) -> str:
        return "cli"

    async def start(self, handler: RequestHandler) -> None:
        self._running = True
        loop = asyncio.get_running_loop()

        print("mediacat (commands: search <name> | play <name> | exit)")
        print("-" * 48)

        while self._running:
            try:
                line = await loop.run_in_executor(None, self._read_input)
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if line is None or line.strip().lower() in ("exit", "quit"):
                break

            text = line.strip()
            if not text:
                continue

            msg = IncomingRequest(
                text=text,
                client_id=_CLI_CLIENT_ID,
                connector_name=self.name,
            )

            response = await handler(msg)
            self.reply(response)

    def _read_input(self) -> str | None:
        sys.stdout.write("\nmediacat> ")
        sys.stdout.flush()
        raw = sys.stdin.buffer.readline()
        if not raw:
            return None
        return raw.decode("utf-8", errors="replace").rstrip("\n")

    async def stop(self) -> None:
        self._running = False

    def reply(self, response: CatalogResponse) -> None:
        if response.text:
            print(response.text, end="" if response.text.endswith("\n") else "\n")
        else:
            print("(no output)")
