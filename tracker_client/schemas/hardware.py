"""Beginner-friendly overview for this module.

WHAT: Hardware inventory records as returned by ``GET /api/v1/hardware``,
plus the create and update payloads for ``POST``/``PATCH``.
WHEN: Built by the response decoder for hardware listings and lookups, and
by callers adding or editing an item.
WHY: Prices stay decimal strings end to end so no value ever drifts through
binary floating point.
HOW: Frozen pydantic models; ``DecimalString`` accepts strings, integers and
``Decimal`` (the decoder parses JSON floats as ``Decimal``).
"""


from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .fields import DecimalString


class HardwareItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    barcode: str
    description: str
    acquisition_cost: Optional[DecimalString] = None
    sales_price: Optional[DecimalString] = None
    created_at: Optional[str] = None
    common_vendors: list[str] = Field(default_factory=list)


class HardwareResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[HardwareItem] = Field(default_factory=list)
    total: int = 0


class HardwareCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    barcode: str
    description: str
    acquisition_cost: Optional[DecimalString] = None
    sales_price: Optional[DecimalString] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class HardwareUpdate(BaseModel):
    """Fields left as None are not sent; the server never clears them."""

    model_config = ConfigDict(frozen=True)

    barcode: Optional[str] = None
    description: Optional[str] = None
    acquisition_cost: Optional[DecimalString] = None
    sales_price: Optional[DecimalString] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
