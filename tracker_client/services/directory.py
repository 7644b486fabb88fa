from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional
from urllib.parse import quote

from ..core.barcodes import barcodes_match
from ..core.errors import ValidationFailure
from ..schemas.client import ClientRecord, ClientsResult
from ..schemas.hardware import HardwareCreate, HardwareItem, HardwareResult, HardwareUpdate
from ..schemas.inventory import InventoryAdjustment, InventoryEvent
from .base import ApiService
from .shapes import ResourceKind

CLIENTS_PATH = "/api/v1/clients"
HARDWARE_PATH = "/api/v1/hardware"
INVENTORY_PATH = "/api/v1/inventory"


def _required(value: str | None, field: str, operation: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationFailure(f"{field} is required", field=field, operation=operation)
    return cleaned


class DirectoryService(ApiService):
    """Client records, the hardware catalogue and inventory stock moves."""

    # ---- clients -----------------------------------------------------------

    async def list_clients(self) -> ClientsResult:
        return await self._call("clients.list", "GET", CLIENTS_PATH, ResourceKind.CLIENTS)

    async def create_client(
        self,
        client_key: str,
        name: str,
        attributes: Optional[Mapping[str, str]] = None,
    ) -> ClientRecord:
        operation = "clients.create"
        body = {
            "client_key": _required(client_key, "client_key", operation),
            "name": _required(name, "name", operation),
            "attributes": dict(attributes or {}),
        }
        return await self._call(operation, "POST", CLIENTS_PATH, ResourceKind.CLIENT, body=body)

    async def update_client(
        self,
        client_key: str,
        *,
        name: Optional[str] = None,
        attributes: Optional[Mapping[str, str]] = None,
    ) -> ClientRecord:
        """Rename a client and/or merge ``attributes`` into its entry.

        Attributes are merged server-side; keys not named here are kept.
        """

        operation = "clients.update"
        key = _required(client_key, "client_key", operation)
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = _required(name, "name", operation)
        if attributes is not None:
            body["attributes"] = dict(attributes)
        path = f"{CLIENTS_PATH}/{quote(key, safe='')}"
        return await self._call(operation, "PATCH", path, ResourceKind.CLIENT, body=body)

    # ---- hardware ----------------------------------------------------------

    async def list_hardware(self, limit: int = 100, offset: int = 0) -> HardwareResult:
        return await self._call(
            "hardware.list",
            "GET",
            HARDWARE_PATH,
            ResourceKind.HARDWARE,
            query={"limit": limit, "offset": offset},
        )

    async def find_hardware(self, barcode: str, page_size: int = 200) -> HardwareItem | None:
        """Walk the inventory page by page until ``barcode`` matches.

        Matching goes through barcode aliases, so ``012345678905`` finds an
        item stored as ``0012345678905``. Deployments that ignore
        ``limit``/``offset`` and return everything at once are scanned once.
        """

        _required(barcode, "barcode", "hardware.find")
        if page_size <= 0:
            raise ValidationFailure("page_size must be positive", field="page_size", operation="hardware.find")

        seen: set[int] = set()
        offset = 0
        while True:
            page = await self.list_hardware(limit=page_size, offset=offset)
            fresh = [item for item in page.items if item.id not in seen]
            for item in fresh:
                if barcodes_match(item.barcode, barcode):
                    return item
            seen.update(item.id for item in fresh)
            offset += len(page.items)
            if len(page.items) != page_size or not fresh:
                # short page, limit ignored, or offset ignored
                return None
            # Only an enveloped reply carries a real total beyond this page.
            if page.total > len(page.items) and offset >= page.total:
                return None

    async def create_hardware(self, item: HardwareCreate) -> HardwareItem:
        operation = "hardware.create"
        _required(item.barcode, "barcode", operation)
        _required(item.description, "description", operation)
        return await self._call(
            operation, "POST", HARDWARE_PATH, ResourceKind.HARDWARE_ITEM, body=item.to_payload()
        )

    async def update_hardware(self, item_id: int, changes: HardwareUpdate) -> HardwareItem:
        return await self._call(
            "hardware.update",
            "PATCH",
            f"{HARDWARE_PATH}/{item_id}",
            ResourceKind.HARDWARE_ITEM,
            body=changes.to_payload(),
        )

    # ---- inventory ---------------------------------------------------------

    async def receive_inventory(
        self,
        quantity: int,
        *,
        barcode: Optional[str] = None,
        hardware_id: Optional[int] = None,
        note: Optional[str] = None,
        vendor_name: Optional[str] = None,
        actual_cost: Decimal | str | None = None,
        sale_price: Decimal | str | None = None,
    ) -> InventoryEvent:
        """Add ``quantity`` units to stock for the item found by id or barcode."""

        return await self._adjust(
            "inventory.receive",
            "receive",
            quantity=quantity,
            barcode=barcode,
            hardware_id=hardware_id,
            note=note,
            vendor_name=vendor_name,
            actual_cost=actual_cost,
            sale_price=sale_price,
        )

    async def use_inventory(
        self,
        quantity: int,
        *,
        barcode: Optional[str] = None,
        hardware_id: Optional[int] = None,
        note: Optional[str] = None,
        client_name: Optional[str] = None,
        actual_cost: Decimal | str | None = None,
        sale_price: Decimal | str | None = None,
    ) -> InventoryEvent:
        """Take ``quantity`` units out of stock for the item found by id or barcode."""

        return await self._adjust(
            "inventory.use",
            "use",
            quantity=quantity,
            barcode=barcode,
            hardware_id=hardware_id,
            note=note,
            client_name=client_name,
            actual_cost=actual_cost,
            sale_price=sale_price,
        )

    async def _adjust(self, operation: str, action: str, **fields: Any) -> InventoryEvent:
        fields["barcode"] = (fields.get("barcode") or "").strip() or None
        if not fields.get("hardware_id") and fields["barcode"] is None:
            raise ValidationFailure("hardware_id or barcode is required", field="barcode", operation=operation)
        try:
            adjustment = InventoryAdjustment(**fields)
        except ValidationFailure as exc:
            raise exc.bind(operation)
        return await self._call(
            operation,
            "POST",
            f"{INVENTORY_PATH}/{action}",
            ResourceKind.INVENTORY_EVENT,
            body=adjustment.to_payload(),
        )
