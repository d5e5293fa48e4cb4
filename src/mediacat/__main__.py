"""Entry point: python -m mediacat [shell|serve|client|demo]

- No args / "shell":     Interactive REPL against a local catalog
- "serve":               Daemon mode (TCP line server, optional HTTP)
- "client [HOST:PORT]":  Interactive REPL against a running server
- "demo [FILE]":         Save the sample catalog to FILE, reload it and print it
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from mediacat.config import load_config

_DEFAULT_DEMO_FILE = "multimedias.txt"


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_shell() -> None:
    """Interactive REPL mode."""
    config = load_config()
    _setup_logging(config.log_level)

    from mediacat.connectors.cli import CLIConnector
    from mediacat.core import Dispatcher
    from mediacat.daemon import CatalogDaemon

    daemon = CatalogDaemon(config)
    dispatcher = Dispatcher(daemon.build_manager())
    dispatcher.add_connector(CLIConnector())

    try:
        asyncio.run(dispatcher.start())
    except KeyboardInterrupt:
        pass


def _run_serve() -> None:
    """Daemon mode: connectors plus catalog lifecycle."""
    config = load_config()
    _setup_logging(config.log_level)

    from mediacat.daemon import CatalogDaemon

    daemon = CatalogDaemon(config)
    try:
        asyncio.run(daemon.run())
    except OSError as e:
        logging.getLogger(__name__).error(
            "Could not start server on port %d: %s", config.server.port, e
        )
        sys.exit(1)


def _run_client(address: str | None) -> None:
    """Interactive REPL against a running `serve` daemon."""
    config = load_config()
    _setup_logging(config.log_level)

    from mediacat.client import CatalogClient, parse_address, run_repl

    try:
        host, port = parse_address(address, config.server.host, config.server.port)
    except ValueError:
        print(f"Invalid address {address!r}, expected HOST:PORT", file=sys.stderr)
        sys.exit(1)
    client = CatalogClient(host, port, config.server.newline_replacement)

    async def session() -> None:
        async with client:
            await run_repl(client)

    try:
        asyncio.run(session())
    except KeyboardInterrupt:
        pass
    except OSError as e:
        logging.getLogger(__name__).error("Could not reach server at %s:%d: %s", host, port, e)
        sys.exit(1)


def _run_demo(path: str | None) -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from mediacat.demo import run_demo

    target = Path(path) if path else config.catalog.data_file or Path(_DEFAULT_DEMO_FILE)
    print(run_demo(target), end="")


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "shell"

    if cmd in ("shell", "repl"):
        _run_shell()
    elif cmd == "serve":
        _run_serve()
    elif cmd == "client":
        _run_client(sys.argv[2] if len(sys.argv) > 2 else None)
    elif cmd == "demo":
        _run_demo(sys.argv[2] if len(sys.argv) > 2 else None)
    else:
        print("Usage: python -m mediacat [shell|serve|client [HOST:PORT]|demo [FILE]]")
        print("  shell   Interactive REPL (default)")
        print("  serve   Daemon mode with TCP (and optional HTTP) server")
        print("  client  Interactive REPL against a running server")
        print("  demo    Save, reload and display the sample catalog")
        sys.exit(1)


if __name__ == "__main__":
    main()
