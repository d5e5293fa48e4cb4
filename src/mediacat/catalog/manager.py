"""The catalog: two name-keyed stores, one for entities and one for groups.

The stores are independent namespaces, so a name may exist in both. Every
read or write of either store happens under a single coarse lock; launching
an external player happens after the lock is released.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, TextIO

from mediacat.catalog.entities import Film, Photo, Video
from mediacat.catalog.errors import DuplicateName, NotFound
from mediacat.catalog.group import Group
from mediacat.playback import Launcher, PlayerLauncher

if TYPE_CHECKING:
    from mediacat.catalog.entities import Media

logger = logging.getLogger(__name__)


class Manager:
    """Factory and owner of every catalog entity and group."""

    def __init__(self, launcher: Launcher | None = None) -> None:
        self.launcher = launcher or PlayerLauncher()
        self._media: dict[str, Media] = {}
        self._groups: dict[str, Group] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._media)

    # ── Entity factories ──────────────────────────────────────

    def _install(self, media: Media) -> Media:
        with self._lock:
            if media.name in self._media:
                raise DuplicateName(media.TAG, media.name)
            self._media[media.name] = media
        logger.debug("Created %s %s", media.TAG, media.name)
        return media

    def create_photo(
        self, name: str, filepath: str, latitude: float = 0.0, longitude: float = 0.0
    ) -> Photo:
        return self._install(Photo(name, filepath, latitude, longitude))

    def create_video(self, name: str, filepath: str, duration: int = 0) -> Video:
        return self._install(Video(name, filepath, duration))

    def create_film(
        self,
        name: str,
        filepath: str,
        duration: int,
        chapters: Sequence[int] | None,
    ) -> Film:
        return self._install(Film(name, filepath, duration, chapters))

    def copy_and_create_film(self, film: Film) -> Film:
        """Install an independent copy of `film` under its name.

        Unlike `create_film`, this overwrites any entity already stored under
        that name.
        """
        copy = film.copy()
        with self._lock:
            replaced = self._media.get(copy.name)
            self._media[copy.name] = copy
        if replaced is not None:
            logger.info("Replaced %s %s with a copy of film %s", replaced.TAG, copy.name, film.name)
        return copy

    # ── Groups ────────────────────────────────────────────────

    def create_group(self, name: str) -> Group:
        with self._lock:
            if name in self._groups:
                raise DuplicateName("Group", name)
            group = Group(name, lock=self._lock)
            self._groups[name] = group
        logger.debug("Created group %s", name)
        return group

    def add_to_group(self, group_name: str, media_name: str) -> Group:
        """Append the entity stored as `media_name` to group `group_name`."""
        with self._lock:
            group = self.get_group(group_name)
            group.append(self.get_media(media_name))
        return group

    # ── Lookup ────────────────────────────────────────────────

    def get_media(self, name: str) -> Media:
        with self._lock:
            media = self._media.get(name)
        if media is None:
            raise NotFound(name, f"No multimedia with this name exists: {name!r}")
        return media

    def get_group(self, name: str) -> Group:
        with self._lock:
            group = self._groups.get(name)
        if group is None:
            raise NotFound(name, f"No group with this name exists: {name!r}")
        return group

    def search_and_display(self, name: str, sink: TextIO) -> None:
        """Render the entity called `name`, or failing that the group.

        Entities take precedence when both stores hold the name.
        """
        with self._lock:
            media = self._media.get(name)
            if media is not None:
                media.render(sink)
                return
            group = self._groups.get(name)
            if group is not None:
                group.render(sink)
                return
        raise NotFound(name)

    def play_media(self, name: str) -> bool:
        """Play the entity called `name`. A miss is reported, not raised.

        Returns True if an entity was found and launched.
        """
        with self._lock:
            media = self._media.get(name)
        if media is None:
            logger.info("No multimedia found with the name: %s", name)
            return False
        media.play(self.launcher)
        return True

    # ── Deletion ──────────────────────────────────────────────

    def delete_by_name(self, name: str) -> None:
        """Remove `name` from the entity store, or failing that the group store.

        Groups that already hold a deleted entity keep it.
        """
        with self._lock:
            if self._media.pop(name, None) is not None:
                logger.info("Multimedia object with name %s deleted", name)
                return
            if self._groups.pop(name, None) is not None:
                logger.info("Group with name %s deleted", name)
                return
        raise NotFound(name, f"No multimedia or group found with the name {name!r}")

    # ── Snapshots ─────────────────────────────────────────────

    def snapshot_entities(self) -> dict[str, Media]:
        with self._lock:
            return dict(self._media)

    def snapshot_groups(self) -> dict[str, Group]:
        with self._lock:
            return dict(self._groups)
