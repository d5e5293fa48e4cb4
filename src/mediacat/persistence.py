"""Whole-catalog load and save on top of the per-record codec."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from mediacat.catalog.codec import replay
from mediacat.catalog.errors import InvalidArgument, ParseAbort

if TYPE_CHECKING:
    from mediacat.catalog.manager import Manager

logger = logging.getLogger(__name__)


def load_catalog(manager: Manager, path: Path) -> int:
    """Replay `path` into `manager`, keeping whatever installed before an abort.

    Returns the number of entities this load installed.
    """
    before = len(manager)
    try:
        return replay(manager, path)
    except ParseAbort as e:
        loaded = len(manager) - before
        logger.error("Catalog load stopped early: %s (%d entities loaded)", e, loaded)
        return loaded


def save_catalog(manager: Manager, path: Path) -> int:
    """Write every entity of a snapshot to `path`, replacing its contents.

    Records are appended one at a time to a sibling temp file which then
    replaces `path`. Groups are not persisted. Returns the number written.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp.write_text("", encoding="utf-8")

    written = 0
    try:
        for name, media in sorted(manager.snapshot_entities().items()):
            try:
                media.serialize(tmp)
            except InvalidArgument as e:
                logger.warning("Skipping %s: %s", name, e)
                continue
            written += 1
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.info("Saved %d entities to %s", written, path)
    return written
