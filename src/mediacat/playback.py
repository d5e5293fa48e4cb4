"""Launch an external viewer or player for a catalog entity.

Photos open in an image viewer, videos and films in a media player. The
program is spawned in the background by default, the way `program path &`
would be from a shell.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from mediacat.catalog.errors import PlaybackError

logger = logging.getLogger(__name__)


@runtime_checkable
class Launcher(Protocol):
    """What an entity needs from the OS to play itself."""

    def view_image(self, filepath: str) -> None: ...

    def play_media(self, filepath: str) -> None: ...


@dataclass
class PlayerLauncher:
    """Spawns `[program, filepath]` for each request.

    With `wait` set, blocks until the program exits and treats a nonzero
    exit status as a failure.
    """

    image_viewer: str = "imagej"
    media_player: str = "mpv"
    wait: bool = False

    def view_image(self, filepath: str) -> None:
        self._launch(self.image_viewer, filepath)

    def play_media(self, filepath: str) -> None:
        self._launch(self.media_player, filepath)

    def _launch(self, program: str, filepath: str) -> None:
        cmd = [program, filepath]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=not self.wait,
            )
        except OSError as e:
            raise PlaybackError(f"Could not launch {program} for {filepath}: {e}") from e

        if not self.wait:
            logger.info("Launched %s (pid=%d) for %s", program, process.pid, filepath)
            return

        returncode = process.wait()
        if returncode != 0:
            logger.error("%s exited with rc=%d for %s", program, returncode, filepath)
            raise PlaybackError(f"{program} exited with status {returncode} for {filepath}")
