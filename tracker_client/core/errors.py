"""Typed failures raised by the tracker client.

Every operation raises exactly one of these to its caller. Messages always
start with the operation name (``tickets.update``, ``clients.list`` ...) so
whatever renders the error can tell which call and which resource failed.
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    code = "tracker_error"

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        self.operation = operation
        self.reason = message
        prefix = f"{operation} failed: " if operation else ""
        super().__init__(prefix + message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": str(self)}
        if self.operation:
            payload["operation"] = self.operation
        return payload

    def bind(self, operation: str) -> TrackerError:
        """Return this failure, tagged with ``operation`` if it has none yet."""

        if self.operation is None:
            self.operation = operation
            self.args = (f"{operation} failed: {self.reason}",)
        return self


class NetworkFailure(TrackerError):
    """Connection problems and timeouts; never retried internally."""

    code = "network_error"

    def __init__(self, message: str, *, operation: str | None = None, timed_out: bool = False) -> None:
        self.timed_out = timed_out
        super().__init__(message, operation=operation)


class HTTPError(TrackerError):
    """The server answered with a non-2xx status."""

    code = "http_error"

    def __init__(self, status: int, detail: str | None = None, *, operation: str | None = None) -> None:
        self.status = status
        self.detail = detail
        message = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"
        super().__init__(message, operation=operation)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["status"] = self.status
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class DecodeFailure(TrackerError):
    """No known payload shape matched the response for ``resource``."""

    code = "decode_error"

    def __init__(self, resource: str, *, operation: str | None = None) -> None:
        self.resource = resource
        super().__init__(f"{resource}: unrecognized payload shape", operation=operation)


class ValidationFailure(TrackerError):
    """A caller-side precondition failed before anything was sent."""

    code = "validation_error"

    def __init__(self, message: str, *, field: str | None = None, operation: str | None = None) -> None:
        self.field = field
        super().__init__(message, operation=operation)


__all__ = [
    "DecodeFailure",
    "HTTPError",
    "NetworkFailure",
    "TrackerError",
    "ValidationFailure",
]
