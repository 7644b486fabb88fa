"""Beginner-friendly overview for this module.

WHAT: One small function per known JSON layout of each resource. Every
function takes the parsed payload and returns the canonical result, or None
when the payload is not in its layout.
WHEN: Driven in order by ``services.decoder.decode``; the first non-None
result wins.
WHY: Different server versions answer ``/api/v1/clients`` with different
layouts (a map keyed by client_key, a list of records, with or without an
envelope). Trying the known layouts in a fixed order keeps the client
decoupled from whichever one a deployment happens to use.
HOW: Structure is checked with pydantic ``TypeAdapter``s. ``_validate`` is
the only place a ``ValidationError`` is caught; everything above it deals in
plain ``None`` results.
"""

from __future__ import annotations

import unicodedata
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from pydantic import StrictInt, StrictStr, TypeAdapter, ValidationError

from ..schemas.client import ClientRecord, ClientsResult
from ..schemas.hardware import HardwareItem, HardwareResult
from ..schemas.inventory import InventoryEvent
from ..schemas.ticket import Ticket

T = TypeVar("T")
Interpreter = Callable[[Any], Optional[Any]]


class ResourceKind(str, Enum):
    CLIENT = "client"
    CLIENTS = "clients"
    HARDWARE = "hardware"
    HARDWARE_ITEM = "hardware_item"
    INVENTORY_EVENT = "inventory_event"
    TICKET = "ticket"
    TICKETS = "tickets"


_ATTRIBUTE_MAP = TypeAdapter(dict[StrictStr, StrictStr])
_ATTRIBUTE_MAPS = TypeAdapter(dict[StrictStr, dict[StrictStr, StrictStr]])
_RECORD = TypeAdapter(ClientRecord)
_RECORD_MAP = TypeAdapter(dict[StrictStr, ClientRecord])
_RECORD_LIST = TypeAdapter(list[ClientRecord])
_KEY_LIST = TypeAdapter(list[StrictStr])
_HARDWARE_ITEM = TypeAdapter(HardwareItem)
_HARDWARE_LIST = TypeAdapter(list[HardwareItem])
_INVENTORY_EVENT = TypeAdapter(InventoryEvent)
_TOTAL = TypeAdapter(StrictInt)
_TICKET = TypeAdapter(Ticket)
_TICKET_LIST = TypeAdapter(list[Ticket])


def _validate(adapter: TypeAdapter[T], value: Any) -> T | None:
    try:
        return adapter.validate_python(value)
    except ValidationError:
        return None


def _collation_key(name: str) -> str:
    # Drop combining marks so "Élan" files under E, then fold case.
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def sort_clients(records: list[ClientRecord]) -> list[ClientRecord]:
    """Case- and accent-insensitive by display name; equal names keep their order."""

    return sorted(records, key=lambda record: _collation_key(record.name))


def _synthesize(attribute_maps: dict[str, dict[str, str]]) -> list[ClientRecord]:
    return [
        ClientRecord.from_attributes_map(client_key, attributes)
        for client_key, attributes in attribute_maps.items()
    ]


def _result(records: list[ClientRecord], attribute_keys: list[str] | None = None) -> ClientsResult:
    return ClientsResult(records=sort_clients(records), attribute_keys=attribute_keys or [])


def _enveloped(payload: Any) -> tuple[Any, list[str]] | None:
    """Split ``{"clients": ..., "attribute_keys": [...]}`` into its parts."""

    if not isinstance(payload, dict) or "clients" not in payload:
        return None
    keys = _validate(_KEY_LIST, payload.get("attribute_keys")) or []
    return payload["clients"], keys


# ---- clients ---------------------------------------------------------------

def clients_enveloped_attribute_maps(payload: Any) -> ClientsResult | None:
    parts = _enveloped(payload)
    if parts is None:
        return None
    clients, keys = parts
    maps = _validate(_ATTRIBUTE_MAPS, clients)
    return None if maps is None else _result(_synthesize(maps), keys)


def clients_enveloped_record_map(payload: Any) -> ClientsResult | None:
    parts = _enveloped(payload)
    if parts is None:
        return None
    clients, keys = parts
    records = _validate(_RECORD_MAP, clients)
    return None if records is None else _result(list(records.values()), keys)


def clients_enveloped_record_list(payload: Any) -> ClientsResult | None:
    parts = _enveloped(payload)
    if parts is None:
        return None
    clients, keys = parts
    records = _validate(_RECORD_LIST, clients)
    return None if records is None else _result(records, keys)


def clients_record_list(payload: Any) -> ClientsResult | None:
    records = _validate(_RECORD_LIST, payload)
    return None if records is None else _result(records)


def clients_record_map(payload: Any) -> ClientsResult | None:
    records = _validate(_RECORD_MAP, payload)
    return None if records is None else _result(list(records.values()))


def clients_attribute_maps(payload: Any) -> ClientsResult | None:
    maps = _validate(_ATTRIBUTE_MAPS, payload)
    return None if maps is None else _result(_synthesize(maps))


CLIENT_SHAPES: tuple[Interpreter, ...] = (
    clients_enveloped_attribute_maps,
    clients_enveloped_record_map,
    clients_enveloped_record_list,
    clients_record_list,
    clients_record_map,
    clients_attribute_maps,
)


# Single records, as returned by create and update.

def client_entry(payload: Any) -> ClientRecord | None:
    """``{"client_key": ..., "client": {attribute map}}``"""

    if not isinstance(payload, dict) or not isinstance(payload.get("client_key"), str):
        return None
    attributes = _validate(_ATTRIBUTE_MAP, payload.get("client"))
    if attributes is None:
        return None
    return ClientRecord.from_attributes_map(payload["client_key"], attributes)


def client_record(payload: Any) -> ClientRecord | None:
    if not isinstance(payload, dict):
        return None
    return _validate(_RECORD, payload)


# ---- hardware --------------------------------------------------------------

def hardware_enveloped(payload: Any) -> HardwareResult | None:
    if not isinstance(payload, dict) or "items" not in payload:
        return None
    items = _validate(_HARDWARE_LIST, payload["items"])
    if items is None:
        return None
    # A missing or malformed total falls back to the item count.
    total = _validate(_TOTAL, payload.get("total"))
    return HardwareResult(items=items, total=len(items) if total is None else total)


def hardware_list(payload: Any) -> HardwareResult | None:
    items = _validate(_HARDWARE_LIST, payload)
    return None if items is None else HardwareResult(items=items, total=len(items))


def hardware_object(payload: Any) -> HardwareItem | None:
    if not isinstance(payload, dict):
        return None
    return _validate(_HARDWARE_ITEM, payload)


HARDWARE_SHAPES: tuple[Interpreter, ...] = (hardware_enveloped, hardware_list)


# ---- inventory -------------------------------------------------------------

def inventory_event(payload: Any) -> InventoryEvent | None:
    if not isinstance(payload, dict):
        return None
    return _validate(_INVENTORY_EVENT, payload)


# ---- tickets ---------------------------------------------------------------

def ticket_object(payload: Any) -> Ticket | None:
    if not isinstance(payload, dict):
        return None
    return _validate(_TICKET, payload)


def ticket_list(payload: Any) -> list[Ticket] | None:
    return _validate(_TICKET_LIST, payload)


INTERPRETERS: dict[ResourceKind, tuple[Interpreter, ...]] = {
    ResourceKind.CLIENT: (client_entry, client_record),
    ResourceKind.CLIENTS: CLIENT_SHAPES,
    ResourceKind.HARDWARE: HARDWARE_SHAPES,
    ResourceKind.HARDWARE_ITEM: (hardware_object,),
    ResourceKind.INVENTORY_EVENT: (inventory_event,),
    ResourceKind.TICKET: (ticket_object,),
    ResourceKind.TICKETS: (ticket_list,),
}
