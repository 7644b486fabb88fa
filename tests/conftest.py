import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tracker_client.client import TrackerClient
from tracker_client.core.config import TrackerSettings

BASE_URL = "http://tracker.test"
API_KEY = "test-secret"


class Recorder:
    """MockTransport handler that answers from a route table and keeps every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def add(self, method: str, path: str, status: int = 200, payload: Any = None, content: bytes | None = None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content)
            return httpx.Response(status, json=payload)

        self.routes[(method, path)] = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not found"})
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture()
def settings() -> TrackerSettings:
    return TrackerSettings(BASE_URL=BASE_URL, API_KEY=API_KEY, TIMEOUT_SECONDS=2.0)


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def make_tracker(settings, recorder):
    def factory(handler=None, **overrides) -> TrackerClient:
        chosen = settings if not overrides else TrackerSettings(
            **{"BASE_URL": BASE_URL, "API_KEY": API_KEY, **overrides}
        )
        return TrackerClient(chosen, transport=httpx.MockTransport(handler or recorder))

    return factory


def _ticket_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "id": 7,
        "client": "Acme Dental",
        "client_key": "acme",
        "start_iso": "2024-01-01T09:00:00",
        "end_iso": None,
        "elapsed_minutes": 0,
        "rounded_minutes": 0,
        "rounded_hours": "0.00",
        "note": None,
        "completed": 0,
        "sent": 0,
        "invoice_number": None,
        "invoiced_total": None,
        "created_at": "2024-01-01T09:00:00",
        "minutes": 0,
        "entry_type": "time",
        "attachments": [],
        "project_id": None,
        "project_posted": 0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def ticket_payload():
    return _ticket_payload
