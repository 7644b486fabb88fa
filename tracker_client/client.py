from __future__ import annotations

import httpx

from .core.config import TrackerSettings, get_settings
from .services.directory import DirectoryService
from .services.tickets import TicketService
from .services.transport import TransportGateway


class TrackerClient:
    """Entry point: owns the settings and the one HTTP gateway.

    ``async with TrackerClient(settings) as tracker:`` then use
    ``tracker.tickets`` and ``tracker.directory``.
    """

    def __init__(
        self,
        settings: TrackerSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._gateway = TransportGateway(self.settings, transport=transport)
        self.tickets = TicketService(self._gateway)
        self.directory = DirectoryService(self._gateway)

    async def aclose(self) -> None:
        await self._gateway.aclose()

    async def __aenter__(self) -> TrackerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
