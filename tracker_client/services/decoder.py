from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from ..core.errors import DecodeFailure
from .shapes import INTERPRETERS, ResourceKind

_UNPARSEABLE = object()


def _load(content: bytes) -> Any:
    # Decimal keeps prices exact; JSON floats never become Python floats.
    try:
        return json.loads(content, parse_float=Decimal)
    except ValueError:
        return _UNPARSEABLE


def decode(content: bytes, kind: ResourceKind, *, operation: str | None = None) -> Any:
    """Run the interpreters for ``kind`` over ``content``, first match wins.

    All or nothing: either the full canonical result comes back or
    ``DecodeFailure`` is raised. Nothing partially decoded escapes.
    """

    payload = _load(content)
    if payload is not _UNPARSEABLE:
        for interpret in INTERPRETERS[kind]:
            result = interpret(payload)
            if result is not None:
                return result
    raise DecodeFailure(kind.value, operation=operation)
