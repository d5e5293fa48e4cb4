"""Connector protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Coroutine, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mediacat.core import CatalogResponse


@dataclass
class IncomingRequest:
    """One request line received from any connector."""

    text: str
    client_id: str
    connector_name: str = ""


# Callback type: core.Dispatcher.handle_request
RequestHandler = Callable[[IncomingRequest], Coroutine[None, None, "CatalogResponse"]]


@runtime_checkable
class Connector(Protocol):
    """Protocol that all transports must implement."""

    @property
    def name(self) -> str: ...

    async def start(self, handler: RequestHandler) -> None:
        """Start accepting requests. Call handler for each complete request line."""
        ...

    async def stop(self) -> None:
        """Gracefully stop the connector."""
        ...
