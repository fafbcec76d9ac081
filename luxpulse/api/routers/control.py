"""API routes for the control-action ledger."""

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.control_service import (
    MANUAL_OVERRIDE,
    SCHEDULE_APPLY,
    SCHEDULE_CREATE,
    ControlActionService,
)
from luxpulse.api.domain.models import ActorType, TargetType
from luxpulse.api.domain.schemas import (
    ConfigSnapshotResponse,
    ControlActionCreate,
    ControlActionEnvelope,
    ControlActionResponse,
    DataResponse,
)
from luxpulse.api.infrastructure.database import get_db_session

router = APIRouter(tags=["control"])


def get_control_service() -> ControlActionService:
    """Dependency to get control-action service."""
    return ControlActionService()


@router.post("/control/actions", response_model=ControlActionEnvelope, status_code=201)
async def append_control_action(
    data: ControlActionCreate,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """Append an action of any type (``actionType`` required)."""
    return await service.append(session, data, header_correlation_id=x_correlation_id)


@router.post("/control/schedules", response_model=ControlActionEnvelope, status_code=201)
async def create_schedule(
    data: ControlActionCreate,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """Record creation of a lighting schedule."""
    return await service.append(session, data, SCHEDULE_CREATE, x_correlation_id)


@router.post("/control/schedules/apply", response_model=ControlActionEnvelope, status_code=201)
async def apply_schedule(
    data: ControlActionCreate,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """Record a schedule being pushed to a target."""
    return await service.append(session, data, SCHEDULE_APPLY, x_correlation_id)


@router.post("/control/overrides", response_model=ControlActionEnvelope, status_code=201)
async def create_override(
    data: ControlActionCreate,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """Record a manual override."""
    return await service.append(session, data, MANUAL_OVERRIDE, x_correlation_id)


@router.get("/control/history", response_model=DataResponse[list[ControlActionResponse]])
async def control_history(
    tenant_id: str | None = Query(None, alias="tenantId"),
    target_type: TargetType | None = Query(None, alias="targetType"),
    target_id: str | None = Query(None, alias="targetId"),
    actor_type: ActorType | None = Query(None, alias="actorType"),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """
    Ledger history.

    Filters are optional and AND-combined; results come back in insertion order
    with no pagination.
    """
    actions = await service.history(
        session, tenant_id=tenant_id, target_type=target_type, target_id=target_id, actor_type=actor_type
    )
    return {"data": actions}


@router.get("/snapshots/config", response_model=DataResponse[ConfigSnapshotResponse])
async def config_snapshot(
    tenant_id: str | None = Query(None, alias="tenantId"),
    site_id: str | None = Query(None, alias="siteId"),
    at: str | None = Query(None),
    session: AsyncSession = Depends(get_db_session),
    service: ControlActionService = Depends(get_control_service),
):
    """Schedules and overrides recorded against a site."""
    if not tenant_id or not site_id or not at:
        raise HTTPException(status_code=400, detail="tenantId, siteId, and at are required")

    return {"data": await service.config_snapshot(session, tenant_id, site_id, at)}
