"""Sample catalog used by `python -m mediacat demo` and `seed_demo = true`."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from mediacat.catalog.errors import CatalogError
from mediacat.catalog.manager import Manager
from mediacat.persistence import load_catalog, save_catalog

if TYPE_CHECKING:
    from mediacat.playback import Launcher

logger = logging.getLogger(__name__)

SAMPLE_GROUP = "My-favorites"


def seed_catalog(manager: Manager) -> None:
    """Install a photo, a video, a group holding both, and a five-chapter film."""
    photo = manager.create_photo("test-photo", "./test-photo.jpg", 10.0, 10.0)
    video = manager.create_video("test-video", "./test-video.mp4", 10)
    group = manager.create_group(SAMPLE_GROUP)
    group.append(photo)
    group.append(video)
    manager.create_film("ToyStory", "./ToyStory.mp4", 20, [10, 20, 30, 40, 50])


def run_demo(path: Path, launcher: Launcher | None = None) -> str:
    """Seed a catalog, save it to `path`, reload it into a fresh one and render it.

    Returns the rendered text of every reloaded entity plus the sample group
    from the original catalog.
    """
    original = Manager(launcher)
    seed_catalog(original)
    save_catalog(original, path)

    reloaded = Manager(launcher)
    load_catalog(reloaded, path)

    out = io.StringIO()
    for name in ("test-photo", "test-video", "ToyStory"):
        try:
            reloaded.search_and_display(name, out)
        except CatalogError as e:
            logger.error("%s", e)
    original.search_and_display(SAMPLE_GROUP, out)
    return out.getvalue()
