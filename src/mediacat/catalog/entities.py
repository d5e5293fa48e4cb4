"""Multimedia records: the closed set of Photo, Video and Film.

Instances are created through `mediacat.catalog.manager.Manager`, which checks
every name against its entity store before installing it. Each variant knows
how to render itself, play itself through a launcher, and write its own
persistence record (see `mediacat.catalog.codec` for the record grammar).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, TextIO

from mediacat.catalog.errors import InvalidArgument, InvalidState

if TYPE_CHECKING:
    from mediacat.playback import Launcher

logger = logging.getLogger(__name__)


@dataclass
class Multimedia(ABC):
    """Identity shared by every variant."""

    TAG: ClassVar[str] = ""

    name: str
    filepath: str

    def _describe(self) -> str:
        return f"Name: {self.name}, filepath: {self.filepath}"

    @abstractmethod
    def render(self, sink: TextIO) -> None: ...

    @abstractmethod
    def play(self, launcher: Launcher) -> None: ...

    @abstractmethod
    def _record_fields(self) -> list[str]: ...

    def to_record(self) -> str:
        """Encode this record as one persistence line (without the newline)."""
        for value in (self.name, self.filepath):
            if not value:
                raise InvalidArgument(
                    f"{self.TAG} {self.name!r}: empty fields cannot be stored in a record"
                )
            if any(ch.isspace() for ch in value):
                raise InvalidArgument(
                    f"{self.TAG} {self.name!r}: whitespace cannot be stored in a record: {value!r}"
                )
        return " ".join([self.TAG, self.name, self.filepath, *self._record_fields()])

    def serialize(self, path: Path | str) -> None:
        """Append this record to `path`, creating the file if needed."""
        line = self.to_record()
        with Path(path).open("a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug("Writing %s %s to %s", self.TAG, self.name, path)


@dataclass
class Photo(Multimedia):
    TAG: ClassVar[str] = "Photo"

    latitude: float = 0.0
    longitude: float = 0.0

    def render(self, sink: TextIO) -> None:
        sink.write(
            f"{self._describe()}, Latitude: {self.latitude:g}, Longitude: {self.longitude:g}\n"
        )

    def play(self, launcher: Launcher) -> None:
        logger.info("Displaying photo %s", self.name)
        launcher.view_image(self.filepath)

    def _record_fields(self) -> list[str]:
        return [repr(float(self.latitude)), repr(float(self.longitude))]


@dataclass
class Video(Multimedia):
    TAG: ClassVar[str] = "Video"

    duration: int = 0

    def render(self, sink: TextIO) -> None:
        sink.write(f"{self._describe()}, Duration: {self.duration}\n")

    def play(self, launcher: Launcher) -> None:
        logger.info("Playing %s %s", self.TAG.lower(), self.name)
        launcher.play_media(self.filepath)

    def _record_fields(self) -> list[str]:
        return [str(self.duration)]


@dataclass(init=False)
class Film(Video):
    """A video split into chapters.

    Chapter durations are held as a tuple, so a Film never shares mutable
    chapter storage with another Film. Construction requires a chapter
    source; an empty one is accepted here but cannot be rendered, and is
    refused when read back from a persistence file.
    """

    TAG: ClassVar[str] = "Film"

    _chapters: tuple[int, ...] = ()

    def __init__(
        self,
        name: str,
        filepath: str,
        duration: int = 0,
        chapters: Sequence[int] | None = None,
    ) -> None:
        super().__init__(name, filepath, duration)
        if chapters is None:
            raise InvalidArgument(f"Film {name!r}: chapters cannot be empty")
        self._chapters = tuple(int(c) for c in chapters)

    @property
    def chapters(self) -> tuple[int, ...]:
        return self._chapters

    @property
    def chapter_count(self) -> int:
        return len(self._chapters)

    def set_chapters(self, chapters: Sequence[int] | None) -> None:
        """Replace the chapters with a copy of `chapters`; None clears them."""
        self._chapters = tuple(int(c) for c in chapters) if chapters else ()

    def copy(self) -> Film:
        return Film(self.name, self.filepath, self.duration, self._chapters)

    def render(self, sink: TextIO) -> None:
        if not self._chapters:
            raise InvalidState(f"Film {self.name!r} has no chapters to display")
        super().render(sink)
        for i, length in enumerate(self._chapters):
            sink.write(f"The duration for chapter {i} of the film is {length}\n")

    def _record_fields(self) -> list[str]:
        return [str(self.duration), str(len(self._chapters)), *map(str, self._chapters)]


Media = Photo | Video | Film
