from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from ..core.errors import TrackerError
from ..core.logging import operation_scope
from .decoder import decode
from .shapes import ResourceKind
from .transport import TransportGateway

logger = logging.getLogger("tracker_client.service")


class ApiService:
    """Shared request -> decode -> log flow for the resource services."""

    def __init__(self, gateway: TransportGateway) -> None:
        self._gateway = gateway

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        kind: ResourceKind | None,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        start = time.perf_counter()
        extra_data: dict[str, Any] = {"method": method, "path": path}
        with operation_scope(operation):
            try:
                raw = await self._gateway.send(method, path, query, body, operation=operation)
                result = None if kind is None else decode(raw.content, kind, operation=operation)
            except TrackerError as exc:
                extra_data.update(
                    error=exc.code,
                    status=getattr(exc, "status", None),
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                logger.warning("operation.failed", extra={"extra_data": extra_data})
                raise
            extra_data.update(
                status=raw.status,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            logger.info("operation.completed", extra={"extra_data": extra_data})
            return result
