"""Service for fault events and maintenance tickets."""

import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.exceptions import ResourceNotFoundException
from luxpulse.api.domain.models import (
    EventSeverity,
    EventStatus,
    Ticket,
    TicketStatus,
    utc_now,
)
from luxpulse.api.domain.schemas import EventResponse, TicketCreate, TicketResponse, TicketUpdate
from luxpulse.api.infrastructure.repositories import EventRepository, TicketRepository


class IncidentService:
    """Service for listing and progressing events and tickets."""

    async def list_events(
        self,
        session: AsyncSession,
        tenant_id: str | None = None,
        status: EventStatus | None = None,
        severity: EventSeverity | None = None,
    ) -> list[EventResponse]:
        repo = EventRepository(session)
        events = await repo.list_filtered(tenant_id=tenant_id, status=status, severity=severity)
        return [EventResponse.model_validate(e) for e in events]

    async def acknowledge_event(self, session: AsyncSession, event_id: str) -> EventResponse:
        """Mark an event acknowledged and stamp the acknowledgement time."""
        repo = EventRepository(session)
        event = await repo.get_by_id(event_id)
        if not event:
            raise ResourceNotFoundException("Event", event_id)

        event.status = EventStatus.ACKNOWLEDGED
        event.acknowledged_at = utc_now()
        await repo.update(event)

        logger.info(f"✓ Acknowledged event {event_id}")
        return EventResponse.model_validate(event)

    async def list_tickets(
        self, session: AsyncSession, tenant_id: str | None = None, status: TicketStatus | None = None
    ) -> list[TicketResponse]:
        repo = TicketRepository(session)
        tickets = await repo.list_filtered(tenant_id=tenant_id, status=status)
        return [TicketResponse.model_validate(t) for t in tickets]

    async def create_ticket(self, session: AsyncSession, data: TicketCreate) -> TicketResponse:
        """Open a ticket; it starts ``assigned`` when an assignee is given."""
        repo = TicketRepository(session)
        ticket = Ticket(
            id=str(uuid.uuid4()),
            tenant_id=data.tenant_id,
            site_id=data.site_id,
            zone_id=data.zone_id,
            asset_id=data.asset_id,
            source_event_id=data.source_event_id,
            status=TicketStatus.ASSIGNED if data.assigned_to else TicketStatus.OPEN,
            priority=data.priority,
            opened_at=utc_now(),
            assigned_to=data.assigned_to,
            sla_due_at=data.sla_due_at,
        )
        await repo.create(ticket)

        logger.info(f"✓ Opened ticket {ticket.id} ({ticket.priority.value}) for asset {ticket.asset_id}")
        return TicketResponse.model_validate(ticket)

    async def update_ticket(self, session: AsyncSession, ticket_id: str, data: TicketUpdate) -> TicketResponse:
        """Apply the provided fields of a ticket patch."""
        repo = TicketRepository(session)
        ticket = await repo.get_by_id(ticket_id)
        if not ticket:
            raise ResourceNotFoundException("Ticket", ticket_id)

        if data.status is not None:
            ticket.status = data.status
        if data.assigned_to is not None:
            ticket.assigned_to = data.assigned_to
        if data.resolution_summary is not None:
            ticket.resolution_summary = data.resolution_summary
        if data.closed_at is not None:
            ticket.closed_at = data.closed_at

        await repo.update(ticket)
        return TicketResponse.model_validate(ticket)
