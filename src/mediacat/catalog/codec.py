"""Line-oriented text records: parsing and file replay.

One entity per line, fields separated by single spaces:

    Photo <name> <filepath> <latitude> <longitude>
    Video <name> <filepath> <duration>
    Film <name> <filepath> <duration> <chapterCount> <chapter1> ... <chapterN>

Each entity formats its own line (`Multimedia.to_record`) and appends it with
`Multimedia.serialize`; writing is append-only, one entity at a time.
Replay feeds each record back through the catalog factories.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from mediacat.catalog.errors import DuplicateName, InvalidArgument, ParseAbort

if TYPE_CHECKING:
    from mediacat.catalog.manager import Manager

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))", re.IGNORECASE
)


# ── Numeric coercion ──────────────────────────────────────────


def coerce_int(text: str) -> int:
    """Parse the leading integer of `text`; anything unparsable is 0."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def coerce_float(text: str) -> float:
    """Parse the leading decimal number of `text`; anything unparsable is 0.0.

    `inf`, `infinity` and `nan` are accepted in any case, so every value
    written with `repr(float)` reads back unchanged.
    """
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


# ── Parsed record types ───────────────────────────────────────


@dataclass
class PhotoRecord:
    name: str
    filepath: str
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass
class VideoRecord:
    name: str
    filepath: str
    duration: int = 0


@dataclass
class FilmRecord:
    name: str
    filepath: str
    duration: int = 0
    chapter_count: int = 0
    chapters: list[int] = field(default_factory=list)


@dataclass
class UnknownRecord:
    """A line whose leading tag names no known variant."""

    tag: str
    line: str


ParsedRecord = PhotoRecord | VideoRecord | FilmRecord | UnknownRecord


# ── Parsing (line -> typed record) ────────────────────────────


def parse_line(line: str) -> ParsedRecord | None:
    """Parse one record line. Returns None for a blank line."""
    tokens = line.split()
    if not tokens:
        return None

    def tok(i: int) -> str:
        return tokens[i] if i < len(tokens) else ""

    tag = tokens[0]
    if tag == "Photo":
        return PhotoRecord(
            name=tok(1),
            filepath=tok(2),
            latitude=coerce_float(tok(3)),
            longitude=coerce_float(tok(4)),
        )
    if tag == "Video":
        return VideoRecord(name=tok(1), filepath=tok(2), duration=coerce_int(tok(3)))
    if tag == "Film":
        count = coerce_int(tok(4))
        return FilmRecord(
            name=tok(1),
            filepath=tok(2),
            duration=coerce_int(tok(3)),
            chapter_count=count,
            # Missing chapter tokens coerce to 0 like any other malformed number.
            chapters=[coerce_int(tok(5 + i)) for i in range(max(count, 0))],
        )
    return UnknownRecord(tag=tag, line=line.rstrip("\n"))


# ── Replay (file -> catalog) ──────────────────────────────────


def _install(manager: Manager, record: ParsedRecord) -> None:
    if isinstance(record, PhotoRecord):
        manager.create_photo(record.name, record.filepath, record.latitude, record.longitude)
    elif isinstance(record, VideoRecord):
        manager.create_video(record.name, record.filepath, record.duration)
    elif isinstance(record, FilmRecord):
        if record.chapter_count <= 0:
            raise InvalidArgument(f"Film {record.name!r}: chapters cannot be empty")
        manager.create_film(record.name, record.filepath, record.duration, record.chapters)


def replay(manager: Manager, path: Path | str) -> int:
    """Replay the records of `path` into `manager`.

    An unreadable file is logged and leaves the catalog untouched. Unknown
    tags are logged and skipped. A duplicate name or a Film without
    chapters stops the replay at that line with `ParseAbort`; records
    installed before it stay installed.

    Returns the number of entities installed.
    """
    path = Path(path)
    try:
        f = path.open(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error("Error opening file: %s (%s)", path, e)
        return 0

    installed = 0
    with f:
        for line_number, line in enumerate(f, start=1):
            record = parse_line(line)
            if record is None:
                continue
            if isinstance(record, UnknownRecord):
                logger.warning(
                    "%s:%d: class type %s doesn't exist, skipping", path, line_number, record.tag
                )
                continue
            try:
                _install(manager, record)
            except (DuplicateName, InvalidArgument) as e:
                logger.error("%s:%d: %s", path, line_number, e)
                raise ParseAbort(path, line_number, str(e)) from e
            installed += 1

    logger.info("Replayed %d records from %s", installed, path)
    return installed
