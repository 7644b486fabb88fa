"""Beginner-friendly overview for this module.

WHAT: Field-level normalization shared by every schema: integer booleans,
ISO-8601 timestamps, money values kept as decimal strings and positive
quantities.
WHEN: Runs whenever a payload is decoded into a schema, and whenever a patch
or creation payload is encoded for the wire.
WHY: The server stores booleans as 0/1, writes timestamps with or without
fractional seconds (sometimes with no offset at all) and prices as strings.
Each quirk is absorbed here once instead of at every call site.
HOW: Plain ``decode_*``/``encode_*``/``parse_*``/``format_*`` helpers, plus
pydantic ``Annotated`` aliases that plug them into models.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Annotated, Any
from zoneinfo import ZoneInfo

from pydantic import BeforeValidator, PlainSerializer

from ..core.errors import ValidationFailure

__all__ = [
    "BooleanFlag",
    "DecimalString",
    "decode_flag",
    "encode_flag",
    "ensure_quantity",
    "format_timestamp",
    "parse_timestamp",
    "quantity_message",
    "utc_now",
]


# ---- Boolean flags ---------------------------------------------------------

def decode_flag(value: Any) -> bool:
    """0/1 integers and native booleans; anything else reads as False."""

    # bool first: it is also an int
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return False


def encode_flag(value: bool) -> int:
    return 1 if value else 0


BooleanFlag = Annotated[
    bool,
    BeforeValidator(decode_flag),
    PlainSerializer(encode_flag, return_type=int),
]


# ---- Timestamps ------------------------------------------------------------

_ZONED_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
_NAIVE_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S")


def _zone(name: str) -> tzinfo:
    if name.strip().upper() in {"UTC", "Z"}:
        return timezone.utc
    return ZoneInfo(name)


def _strptime(value: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return None


def parse_timestamp(value: str | None, default_tz: str = "UTC") -> datetime | None:
    """Parse an ISO-8601 instant into an aware datetime.

    Fractional seconds are tried first, then whole seconds. Values with no
    offset (the server stores naive local times) are read in ``default_tz``.
    Returns None for empty or unparseable input.
    """

    if not value:
        return None
    text = value.strip()
    for fmt in _ZONED_FORMATS:
        parsed = _strptime(text, fmt)
        if parsed is not None:
            return parsed
    for fmt in _NAIVE_FORMATS:
        parsed = _strptime(text, fmt)
        if parsed is not None:
            return parsed.replace(tzinfo=_zone(default_tz))
    return None


def format_timestamp(moment: datetime) -> str:
    """UTC, millisecond precision, ``Z`` suffix: ``2024-01-01T00:00:00.000Z``.

    Naive datetimes are taken to be UTC already.
    """

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---- Money -----------------------------------------------------------------

def _to_decimal_string(value: Any) -> Any:
    # Floats and bools fall through and fail the ``str`` check.
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, Decimal)):
        return str(value)
    return value


DecimalString = Annotated[str, BeforeValidator(_to_decimal_string)]


# ---- Quantities ------------------------------------------------------------

_QUANTITY_LABELS = {
    "hardware_quantity": "Hardware quantity",
    "flat_rate_quantity": "Flat rate quantity",
}


def quantity_message(field: str) -> str:
    return f"{_QUANTITY_LABELS.get(field, 'Quantity')} must be a positive integer."


def ensure_quantity(value: Any, field: str) -> int:
    """Return ``value`` if it is a positive int, else raise ``ValidationFailure``."""

    # bool is an int subclass but never a quantity
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationFailure(quantity_message(field), field=field)
    return value
