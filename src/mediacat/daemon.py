"""Daemon process: always-on catalog server.

Usage: python -m mediacat serve

Manages:
- Catalog lifecycle (load from the data file at start, optional save at exit)
- Connector lifecycle (TCP line server, optional HTTP)
- PID file (prevent duplicate instances)
- Graceful shutdown (SIGTERM/SIGINT)
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys

from mediacat.catalog.errors import CatalogError
from mediacat.catalog.manager import Manager
from mediacat.config import MediacatConfig, load_config
from mediacat.connectors.tcp import TCPConnector
from mediacat.core import Dispatcher
from mediacat.persistence import load_catalog, save_catalog
from mediacat.playback import PlayerLauncher

logger = logging.getLogger(__name__)


class CatalogDaemon:
    """Always-on daemon process."""

    def __init__(self, config: MediacatConfig | None = None) -> None:
        self.config = config or load_config()
        self._shutdown_event = asyncio.Event()

    # ── PID file management ──────────────────────────────────

    def _write_pid(self) -> None:
        self.config.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.config.pid_file.write_text(str(os.getpid()))
        logger.info("PID file written: %s (pid=%d)", self.config.pid_file, os.getpid())

    def _remove_pid(self) -> None:
        if self.config.pid_file.exists():
            self.config.pid_file.unlink()

    def _check_existing(self) -> None:
        if not self.config.pid_file.exists():
            return
        try:
            pid = int(self.config.pid_file.read_text().strip())
            os.kill(pid, 0)  # Check if process exists
            print(f"mediacat daemon already running (pid={pid}). Exiting.", file=sys.stderr)
            sys.exit(1)
        except (ProcessLookupError, ValueError):
            # Stale PID file
            self._remove_pid()

    # ── Signal handling ──────────────────────────────────────

    def _setup_signals(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down...", sig.name)
        self._shutdown_event.set()

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    # ── Build components ─────────────────────────────────────

    def build_manager(self) -> Manager:
        player = self.config.player
        manager = Manager(
            PlayerLauncher(
                image_viewer=player.image_viewer,
                media_player=player.media_player,
                wait=player.wait,
            )
        )

        data_file = self.config.catalog.data_file
        if data_file:
            load_catalog(manager, data_file)

        if self.config.catalog.seed_demo:
            from mediacat.demo import seed_catalog

            try:
                seed_catalog(manager)
            except CatalogError as e:
                logger.warning("Demo data not fully seeded: %s", e)

        logger.info(
            "Catalog ready: %d entities, %d groups",
            len(manager),
            len(manager.snapshot_groups()),
        )
        return manager

    def _build_connectors(self, dispatcher: Dispatcher) -> None:
        dispatcher.add_connector(TCPConnector(self.config.server))
        if self.config.http.enabled:
            from mediacat.connectors.http import HTTPConnector

            dispatcher.add_connector(HTTPConnector(self.config.http))

    def _save(self, manager: Manager) -> None:
        data_file = self.config.catalog.data_file
        if not (self.config.catalog.save_on_exit and data_file):
            return
        try:
            save_catalog(manager, data_file)
        except OSError as e:
            logger.error("Could not save catalog to %s: %s", data_file, e)

    # ── Main run loop ────────────────────────────────────────

    async def run(self) -> None:
        self._check_existing()
        self._write_pid()
        self._setup_signals()

        manager = self.build_manager()
        dispatcher = Dispatcher(manager)
        self._build_connectors(dispatcher)

        logger.info("mediacat daemon starting (port=%d)", self.config.server.port)

        try:
            await dispatcher.start()
            await self._shutdown_event.wait()
        except asyncio.CancelledError:
            pass
        finally:
            await dispatcher.stop()
            self._save(manager)
            self._remove_pid()
            logger.info("mediacat daemon stopped.")
