"""API routes for events and tickets."""

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.control_service import resolve_correlation_id
from luxpulse.api.application.incident_service import IncidentService
from luxpulse.api.domain.models import EventSeverity, EventStatus, TicketStatus
from luxpulse.api.domain.schemas import (
    DataResponse,
    EventResponse,
    TicketCreate,
    TicketResponse,
    TicketUpdate,
)
from luxpulse.api.infrastructure.database import get_db_session

router = APIRouter(tags=["incidents"])


def get_incident_service() -> IncidentService:
    """Dependency to get incident service."""
    return IncidentService()


@router.get("/events", response_model=DataResponse[list[EventResponse]])
async def list_events(
    tenant_id: str | None = Query(None, alias="tenantId"),
    status: EventStatus | None = Query(None),
    severity: EventSeverity | None = Query(None),
    session: AsyncSession = Depends(get_db_session),
    service: IncidentService = Depends(get_incident_service),
):
    """List events, newest first."""
    return {"data": await service.list_events(session, tenant_id=tenant_id, status=status, severity=severity)}


@router.post("/events/{event_id}/acknowledge")
async def acknowledge_event(
    event_id: str,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: IncidentService = Depends(get_incident_service),
):
    event = await service.acknowledge_event(session, event_id)
    return {
        "data": event.model_dump(mode="json", by_alias=True),
        "correlationId": resolve_correlation_id(x_correlation_id),
    }


@router.get("/tickets", response_model=DataResponse[list[TicketResponse]])
async def list_tickets(
    tenant_id: str | None = Query(None, alias="tenantId"),
    status: TicketStatus | None = Query(None),
    session: AsyncSession = Depends(get_db_session),
    service: IncidentService = Depends(get_incident_service),
):
    return {"data": await service.list_tickets(session, tenant_id=tenant_id, status=status)}


@router.post("/tickets", response_model=DataResponse[TicketResponse], status_code=201)
async def create_ticket(
    data: TicketCreate,
    session: AsyncSession = Depends(get_db_session),
    service: IncidentService = Depends(get_incident_service),
):
    """Open a ticket by hand."""
    return {"data": await service.create_ticket(session, data)}


@router.patch("/tickets/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    data: TicketUpdate,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: IncidentService = Depends(get_incident_service),
):
    """Progress a ticket (status, assignee, resolution)."""
    ticket = await service.update_ticket(session, ticket_id, data)
    return {
        "data": ticket.model_dump(mode="json", by_alias=True),
        "correlationId": resolve_correlation_id(x_correlation_id),
    }
