"""Partial ticket updates with explicit omit / null / set semantics.

``PATCH /api/v1/tickets/{id}`` treats a missing key as "leave unchanged" and
an explicit ``null`` as "erase". A plain Optional cannot tell those apart, so
every editable field carries one of three intents:

* ``UNSET``       -> key left out of the payload
* ``CLEAR``       -> key sent as ``null``
* ``Set(value)``  -> key sent with ``value``
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar, Union

from ..core.errors import ValidationFailure
from ..core.ticket_types import is_supported_entry_type, normalize_entry_type
from ..schemas.fields import (
    encode_flag,
    ensure_quantity,
    format_timestamp,
    parse_timestamp,
    quantity_message,
    utc_now,
)
from ..schemas.ticket import NewTicket

T = TypeVar("T")


class _Intent:
    """Marker for the two value-less intents."""

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


UNSET = _Intent("UNSET")
CLEAR = _Intent("CLEAR")


@dataclass(frozen=True)
class Set(Generic[T]):
    value: T


FieldIntent = Union[_Intent, Set[Any]]

_FLAG_FIELDS = {"completed", "sent"}
_TIMESTAMP_FIELDS = {"start_iso", "end_iso"}
_QUANTITY_FIELDS = {"hardware_quantity", "flat_rate_quantity"}


def _encode(field: str, value: Any) -> Any:
    if field in _FLAG_FIELDS:
        return encode_flag(bool(value))
    if field in _TIMESTAMP_FIELDS:
        # strings are re-emitted in the canonical UTC millisecond form
        moment = parse_timestamp(value) if isinstance(value, str) else value
        if not isinstance(moment, datetime):
            raise ValidationFailure(f"{field} must be an ISO-8601 timestamp", field=field)
        return format_timestamp(moment)
    if field in _QUANTITY_FIELDS:
        return ensure_quantity(value, field)
    if isinstance(value, Decimal):
        return str(value)
    return value


@dataclass(frozen=True)
class TicketPatch:
    client_key: FieldIntent = UNSET
    client: FieldIntent = UNSET
    start_iso: FieldIntent = UNSET
    end_iso: FieldIntent = UNSET
    note: FieldIntent = UNSET
    completed: FieldIntent = UNSET
    sent: FieldIntent = UNSET
    invoice_number: FieldIntent = UNSET
    invoiced_total: FieldIntent = UNSET
    entry_type: FieldIntent = UNSET
    hardware_id: FieldIntent = UNSET
    hardware_barcode: FieldIntent = UNSET
    hardware_quantity: FieldIntent = UNSET
    hardware_description: FieldIntent = UNSET
    hardware_sales_price: FieldIntent = UNSET
    flat_rate_amount: FieldIntent = UNSET
    flat_rate_quantity: FieldIntent = UNSET
    project_id: FieldIntent = UNSET

    def build(self) -> dict[str, Any]:
        """Return the JSON-ready payload; raises ``ValidationFailure``."""

        payload: dict[str, Any] = {}
        for item in fields(self):
            intent = getattr(self, item.name)
            if intent is UNSET:
                continue
            if intent is CLEAR:
                payload[item.name] = None
            elif isinstance(intent, Set):
                payload[item.name] = _encode(item.name, intent.value)
            else:
                raise TypeError(f"{item.name}: expected UNSET, CLEAR or Set(...), got {intent!r}")
        return payload

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is UNSET for item in fields(self))


# ---- form helpers ----------------------------------------------------------

def text_intent(text: str | None) -> FieldIntent:
    """Blank text erases the field, anything else sets it (trimmed)."""

    cleaned = (text or "").strip()
    return CLEAR if not cleaned else Set(cleaned)


def quantity_intent(text: str | None, field: str) -> FieldIntent:
    """Blank clears; a positive integer sets; anything else is rejected."""

    cleaned = (text or "").strip()
    if not cleaned:
        return CLEAR
    try:
        quantity = int(cleaned)
    except ValueError:
        quantity = 0
    if quantity > 0:
        return Set(quantity)
    raise ValidationFailure(quantity_message(field), field=field)


# ---- quick actions ---------------------------------------------------------

def mark_completed(completed: bool = True) -> TicketPatch:
    return TicketPatch(completed=Set(completed))


def mark_sent(sent: bool = True) -> TicketPatch:
    return TicketPatch(sent=Set(sent))


def stop_now(now: datetime | None = None) -> TicketPatch:
    return TicketPatch(end_iso=Set(now or utc_now()))


def start_new(client_key: str, entry_type: str, now: datetime | None = None) -> NewTicket:
    """Creation payload for an open ticket starting at ``now``."""

    cleaned_key = (client_key or "").strip()
    if not cleaned_key:
        raise ValidationFailure("client_key is required", field="client_key")
    if not is_supported_entry_type(entry_type):
        raise ValidationFailure(f"unsupported entry_type {entry_type!r}", field="entry_type")
    return NewTicket(
        client_key=cleaned_key,
        entry_type=normalize_entry_type(entry_type),
        start_iso=format_timestamp(now or utc_now()),
        sent=False,
        completed=False,
    )
