"""Beginner-friendly overview for this module.

WHAT: The canonical ticket shapes the client works with: what the server
returns (``Ticket``) and what a create call sends (``NewTicket``).
WHEN: ``Ticket`` is built by the response decoder for every ticket endpoint;
``NewTicket`` is built by the quick-start action or by callers directly.
WHY: Field names mirror the server contract verbatim, so a ticket can be
read from and written to the wire without renaming anything.
HOW: Frozen pydantic models. ``completed``/``sent`` go through
``BooleanFlag`` and the wire timestamps stay strings, with ``start_at`` and
``end_at`` exposing them as datetimes.
"""


from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ..core.ticket_types import ENTRY_TYPE_TIME, HARDWARE_LIKE_ENTRY_TYPES, normalize_entry_type
from .fields import BooleanFlag, DecimalString, ensure_quantity, parse_timestamp


class TicketAttachment(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    filename: str
    content_type: Optional[str] = None
    size: Optional[int] = None
    uploaded_at: str
    url: Optional[str] = None


class Ticket(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    client: Optional[str] = None
    client_key: str
    entry_type: str = ENTRY_TYPE_TIME
    start_iso: str
    end_iso: Optional[str] = None
    note: Optional[str] = None
    completed: BooleanFlag = False
    sent: BooleanFlag = False
    invoice_number: Optional[str] = None
    invoiced_total: Optional[DecimalString] = None
    elapsed_minutes: Optional[int] = None
    rounded_minutes: Optional[int] = None
    rounded_hours: Optional[DecimalString] = None
    minutes: Optional[int] = None
    created_at: Optional[str] = None
    hardware_id: Optional[int] = None  # hardware-like entries only
    hardware_barcode: Optional[str] = None
    hardware_description: Optional[str] = None
    hardware_sales_price: Optional[DecimalString] = None
    hardware_quantity: Optional[int] = None
    flat_rate_amount: Optional[DecimalString] = None
    flat_rate_quantity: Optional[int] = None
    calculated_value: Optional[DecimalString] = None
    project_id: Optional[int] = None
    attachments: list[TicketAttachment] = Field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return not self.end_iso

    @property
    def is_hardware_like(self) -> bool:
        return self.entry_type in HARDWARE_LIKE_ENTRY_TYPES

    def start_at(self, default_tz: str = "UTC") -> datetime | None:
        return parse_timestamp(self.start_iso, default_tz)

    def end_at(self, default_tz: str = "UTC") -> datetime | None:
        return parse_timestamp(self.end_iso, default_tz)


class NewTicket(BaseModel):
    """Creation payload for ``POST /api/v1/tickets``."""

    model_config = ConfigDict(frozen=True)

    client_key: str
    entry_type: str = ENTRY_TYPE_TIME
    start_iso: str
    end_iso: Optional[str] = None
    note: Optional[str] = None
    invoice_number: Optional[str] = None
    sent: BooleanFlag = False
    completed: BooleanFlag = False
    hardware_id: Optional[int] = None
    hardware_barcode: Optional[str] = None
    hardware_quantity: Optional[int] = None
    flat_rate_amount: Optional[DecimalString] = None
    flat_rate_quantity: Optional[int] = None
    project_id: Optional[int] = None

    @field_validator("entry_type", mode="before")
    @classmethod
    def _normalize_entry_type(cls, value: Any) -> Any:
        return normalize_entry_type(value) if isinstance(value, str) else value

    @field_validator("hardware_quantity", "flat_rate_quantity", mode="before")
    @classmethod
    def _positive_quantity(cls, value: Any, info: ValidationInfo) -> Any:
        # ValidationFailure is not a ValueError, so pydantic lets it through untouched.
        return None if value is None else ensure_quantity(value, info.field_name)

    def to_payload(self) -> dict[str, Any]:
        # Unset optionals are omitted, never sent as null.
        return self.model_dump(mode="json", exclude_none=True)
