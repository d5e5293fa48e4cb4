"""Named, ordered collections of shared entity references."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from mediacat.catalog.entities import Media


class Group:
    """An ordered sequence of entities under a name.

    A group holds references, never copies: the same entity may sit in the
    entity store and in any number of groups at once, and stays alive as long
    as any of them still refers to it. Members may repeat.
    """

    def __init__(self, name: str, lock: threading.RLock | None = None) -> None:
        self.name = name
        self._members: list[Media] = []
        # Shared with the owning Manager so appends serialize with store mutations.
        self._lock = lock or threading.RLock()

    def append(self, media: Media) -> None:
        with self._lock:
            self._members.append(media)

    @property
    def members(self) -> tuple[Media, ...]:
        with self._lock:
            return tuple(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Media]:
        return iter(self.members)

    def __contains__(self, media: object) -> bool:
        return any(m is media for m in self.members)

    def render(self, sink: TextIO) -> None:
        with self._lock:
            sink.write(f"Group Name: {self.name}\n")
            for media in self._members:
                media.render(sink)

    def __repr__(self) -> str:
        return f"Group(name={self.name!r}, members={[m.name for m in self.members]!r})"
