from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .fields import DecimalString, ensure_quantity


class InventoryAdjustment(BaseModel):
    """Body for ``POST /api/v1/inventory/receive`` and ``/use``.

    ``quantity`` is always positive; the endpoint decides the sign.
    """

    model_config = ConfigDict(frozen=True)

    hardware_id: Optional[int] = None
    barcode: Optional[str] = None
    quantity: int
    note: Optional[str] = None
    vendor_name: Optional[str] = None
    client_name: Optional[str] = None
    actual_cost: Optional[DecimalString] = None
    sale_price: Optional[DecimalString] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _positive_quantity(cls, value: Any) -> Any:
        return ensure_quantity(value, "quantity")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class InventoryEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    hardware_id: int
    change: int
    source: str
    note: Optional[str] = None
    created_at: str
    ticket_id: Optional[int] = None
    hardware_barcode: Optional[str] = None
    hardware_description: Optional[str] = None
    counterparty_name: Optional[str] = None
    counterparty_type: Optional[str] = None
    actual_cost: Optional[DecimalString] = None
    unit_cost: Optional[DecimalString] = None
    sale_price_total: Optional[DecimalString] = None
    sale_unit_price: Optional[DecimalString] = None
    profit_total: Optional[DecimalString] = None
    profit_unit: Optional[DecimalString] = None
