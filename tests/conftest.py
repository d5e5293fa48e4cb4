"""Shared fixtures: a launcher that records instead of spawning programs."""

from __future__ import annotations

import pytest

from mediacat.catalog.manager import Manager


class RecordingLauncher:
    """Stands in for PlayerLauncher; remembers what it was asked to open."""

    def __init__(self) -> None:
        self.images: list[str] = []
        self.media: list[str] = []

    def view_image(self, filepath: str) -> None:
        self.images.append(filepath)

    def play_media(self, filepath: str) -> None:
        self.media.append(filepath)


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def manager(launcher: RecordingLauncher) -> Manager:
    return Manager(launcher)
