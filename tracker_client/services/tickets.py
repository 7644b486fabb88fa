"""Beginner-friendly overview for this module.

WHAT: Ticket operations against ``/api/v1/tickets``: list, active list,
fetch, create, partial update, delete, plus the one-tap quick actions.
WHEN: Called by whatever front end drives the tracker (the CLI in this
package, or an app that embeds the client).
WHY: Callers get canonical ``Ticket`` snapshots back and replace what they
hold with them; nothing here edits a ticket in place or keeps state between
calls, so overlapping calls simply resolve as "last response wins".
HOW: Each method validates its input, sends one request through the
gateway and decodes the reply. Validation problems raise
``ValidationFailure`` before any request is made.
"""


from __future__ import annotations

from datetime import datetime

from ..core.errors import ValidationFailure
from ..core.ticket_types import ENTRY_TYPE_TIME, is_supported_entry_type
from ..schemas.ticket import NewTicket, Ticket
from . import patches
from .base import ApiService
from .patches import TicketPatch
from .shapes import ResourceKind

TICKETS_PATH = "/api/v1/tickets"


class TicketService(ApiService):
    async def list_tickets(self) -> list[Ticket]:
        return await self._call("tickets.list", "GET", TICKETS_PATH, ResourceKind.TICKETS)

    async def list_active_tickets(self, client_key: str | None = None) -> list[Ticket]:
        cleaned = (client_key or "").strip()
        query = {"client_key": cleaned} if cleaned else None
        return await self._call(
            "tickets.list_active", "GET", f"{TICKETS_PATH}/active", ResourceKind.TICKETS, query=query
        )

    async def get_ticket(self, ticket_id: int) -> Ticket:
        return await self._call("tickets.get", "GET", f"{TICKETS_PATH}/{ticket_id}", ResourceKind.TICKET)

    async def create_ticket(self, new_ticket: NewTicket) -> Ticket:
        operation = "tickets.create"
        # The server decides whether client_key exists; only shape is checked here.
        if not new_ticket.client_key.strip():
            raise ValidationFailure("client_key is required", field="client_key", operation=operation)
        if not is_supported_entry_type(new_ticket.entry_type):
            raise ValidationFailure(
                f"unsupported entry_type {new_ticket.entry_type!r}", field="entry_type", operation=operation
            )
        return await self._call(
            operation, "POST", TICKETS_PATH, ResourceKind.TICKET, body=new_ticket.to_payload()
        )

    async def update_ticket(self, ticket_id: int, patch: TicketPatch) -> Ticket:
        operation = "tickets.update"
        try:
            body = patch.build()
        except ValidationFailure as exc:
            raise exc.bind(operation)
        return await self._call(operation, "PATCH", f"{TICKETS_PATH}/{ticket_id}", ResourceKind.TICKET, body=body)

    async def delete_ticket(self, ticket_id: int) -> None:
        await self._call("tickets.delete", "DELETE", f"{TICKETS_PATH}/{ticket_id}", None)

    # ---- quick actions ------------------------------------------------------

    async def mark_completed(self, ticket_id: int, completed: bool = True) -> Ticket:
        return await self.update_ticket(ticket_id, patches.mark_completed(completed))

    async def mark_sent(self, ticket_id: int, sent: bool = True) -> Ticket:
        return await self.update_ticket(ticket_id, patches.mark_sent(sent))

    async def stop_now(self, ticket_id: int, now: datetime | None = None) -> Ticket:
        return await self.update_ticket(ticket_id, patches.stop_now(now))

    async def start_new(
        self,
        client_key: str,
        entry_type: str = ENTRY_TYPE_TIME,
        now: datetime | None = None,
    ) -> Ticket:
        try:
            new_ticket = patches.start_new(client_key, entry_type, now)
        except ValidationFailure as exc:
            raise exc.bind("tickets.start_new")
        return await self.create_ticket(new_ticket)
