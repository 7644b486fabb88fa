import asyncio
import json
import logging

import pytest
from pydantic import ValidationError

from tracker_client.core.config import TrackerSettings
from tracker_client.core.errors import HTTPError, ValidationFailure
from tracker_client.core.logging import JsonLogFormatter, operation_scope

KEY_ENV_VARS = ("API_KEY", "API_TOKEN", "TRACKER_API_TOKEN")


@pytest.fixture()
def clean_env(monkeypatch):
    for name in KEY_ENV_VARS + ("BASE_URL",):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_read_legacy_token_variable(clean_env):
    clean_env.setenv("TRACKER_API_TOKEN", "  from-env  ")
    clean_env.setenv("BASE_URL", "https://tracker.example.com/")

    settings = TrackerSettings()

    assert settings.API_KEY == "from-env"
    assert settings.BASE_URL == "https://tracker.example.com"


def test_settings_are_immutable(clean_env):
    settings = TrackerSettings(BASE_URL="http://tracker.test")

    with pytest.raises(ValidationError):
        settings.API_KEY = "changed"


def test_blank_base_url_is_rejected(clean_env):
    with pytest.raises(ValidationError):
        TrackerSettings(BASE_URL=" / ")


def _record(message, extra_data=None):
    record = logging.LogRecord("tracker_client.service", logging.INFO, __file__, 1, message, None, None)
    if extra_data is not None:
        record.extra_data = extra_data
    return record


def test_json_formatter_includes_operation_and_extra():
    formatter = JsonLogFormatter()

    with operation_scope("tickets.update"):
        inside = json.loads(formatter.format(_record("operation.completed", {"status": 200})))
    outside = json.loads(formatter.format(_record("plain")))

    assert inside["operation"] == "tickets.update"
    assert inside["status"] == 200
    assert inside["level"] == "INFO"
    assert inside["timestamp"].endswith("Z")
    assert "operation" not in outside


def test_failed_operation_is_logged(make_tracker, recorder, caplog):
    recorder.add("GET", "/api/v1/tickets", status=503, payload={"detail": "maintenance"})
    tracker = make_tracker()

    async def go():
        async with tracker:
            await tracker.tickets.list_tickets()

    with caplog.at_level(logging.INFO, logger="tracker_client.service"):
        with pytest.raises(HTTPError):
            asyncio.run(go())

    failed = [record for record in caplog.records if record.getMessage() == "operation.failed"]
    assert len(failed) == 1
    assert failed[0].extra_data["status"] == 503
    assert failed[0].extra_data["error"] == "http_error"


def test_error_to_dict_and_bind():
    error = ValidationFailure("client_key is required", field="client_key")

    assert error.bind("tickets.start_new") is error
    assert error.bind("other") is error
    assert error.to_dict() == {
        "code": "validation_error",
        "message": "tickets.start_new failed: client_key is required",
        "operation": "tickets.start_new",
    }
    assert HTTPError(404, "Not found", operation="tickets.get").to_dict()["status"] == 404
