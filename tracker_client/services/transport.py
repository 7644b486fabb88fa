from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from ..core.config import TrackerSettings
from ..core.errors import HTTPError, NetworkFailure


@dataclass(frozen=True)
class RawResponse:
    status: int
    content: bytes


def _error_detail(content: bytes) -> Optional[str]:
    """Pull a readable message out of an error body, if there is one.

    Understands ``{"detail": "..."}`` and the server's
    ``{"code": ..., "message": ...}`` envelope.
    """

    if not content:
        return None
    try:
        data = json.loads(content)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    detail = data.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail.strip()
    message = data.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


class TransportGateway:
    """Authenticated JSON requests against the tracker API.

    No retries, no logging, no caching: a call either returns the 2xx body
    untouched or raises ``HTTPError``/``NetworkFailure``.
    """

    def __init__(
        self,
        settings: TrackerSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.BASE_URL,
            timeout=httpx.Timeout(settings.TIMEOUT_SECONDS),
            transport=transport,
        )

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self._settings.API_KEY:
            headers["X-API-Key"] = self._settings.API_KEY
        return headers

    async def send(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        operation: str,
    ) -> RawResponse:
        content = None if body is None else json.dumps(body).encode("utf-8")
        params = {key: value for key, value in (query or {}).items() if value is not None}
        try:
            response = await self._client.request(
                method,
                path,
                params=params or None,
                content=content,
                headers=self._headers(content is not None),
            )
        except httpx.TimeoutException as exc:
            raise NetworkFailure(
                f"request timed out ({method} {path})", operation=operation, timed_out=True
            ) from exc
        except httpx.RequestError as exc:
            raise NetworkFailure(f"{exc} ({method} {path})", operation=operation) from exc

        if response.is_success:
            return RawResponse(status=response.status_code, content=response.content)
        raise HTTPError(response.status_code, _error_detail(response.content), operation=operation)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> TransportGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
