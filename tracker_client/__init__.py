"""Async client for the Time Tracker API (tickets, clients, hardware)."""

from __future__ import annotations

from .client import TrackerClient
from .core.config import TrackerSettings, get_settings
from .core.errors import DecodeFailure, HTTPError, NetworkFailure, TrackerError, ValidationFailure
from .schemas.client import ClientRecord, ClientsResult
from .schemas.hardware import HardwareCreate, HardwareItem, HardwareResult, HardwareUpdate
from .schemas.inventory import InventoryAdjustment, InventoryEvent
from .schemas.ticket import NewTicket, Ticket
from .services.patches import CLEAR, UNSET, Set, TicketPatch

__all__ = [
    "CLEAR",
    "ClientRecord",
    "ClientsResult",
    "DecodeFailure",
    "HTTPError",
    "HardwareCreate",
    "HardwareItem",
    "HardwareResult",
    "HardwareUpdate",
    "InventoryAdjustment",
    "InventoryEvent",
    "NetworkFailure",
    "NewTicket",
    "Set",
    "Ticket",
    "TicketPatch",
    "TrackerClient",
    "TrackerError",
    "TrackerSettings",
    "UNSET",
    "ValidationFailure",
    "get_settings",
]
