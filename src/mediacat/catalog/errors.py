"""Error kinds raised by the catalog and its collaborators."""

from __future__ import annotations

from pathlib import Path


class CatalogError(Exception):
    """Base class for every catalog failure."""


class DuplicateName(CatalogError):
    """A name is already taken in the store it was created in."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} name already exists: {name!r}")
        self.kind = kind
        self.name = name


class NotFound(CatalogError):
    """No entity or group answers to the requested name."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"No group or multimedia with this name exists: {name!r}")
        self.name = name


class InvalidArgument(CatalogError, ValueError):
    """A constructor or operation was given an unusable argument."""


class InvalidState(CatalogError):
    """A value is in a state the requested operation cannot handle."""


class PlaybackError(CatalogError):
    """The external viewer or player could not be launched, or exited nonzero."""


class ParseAbort(CatalogError):
    """Replay of a persistence file stopped at a record it could not install."""

    def __init__(self, path: Path, line_number: int, reason: str) -> None:
        super().__init__(f"{path}:{line_number}: replay aborted: {reason}")
        self.path = path
        self.line_number = line_number
