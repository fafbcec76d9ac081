"""API routes for the rule catalogue and replays."""

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.control_service import resolve_correlation_id
from luxpulse.api.application.rule_service import RuleService
from luxpulse.api.domain.schemas import DataResponse, ReplayRequest, ReplayResponse, RuleCatalogueEntry
from luxpulse.api.infrastructure.container import get_container
from luxpulse.api.infrastructure.database import get_db_session
from luxpulse.rules.domain.exceptions import UnknownFixtureError
from luxpulse.rules.infrastructure.fixtures import list_fixtures

router = APIRouter(prefix="/rules", tags=["rules"])


def get_rule_service() -> RuleService:
    """Dependency to get rule service."""
    container = get_container()
    return RuleService(engine=container.rule_engine())


@router.get("", response_model=DataResponse[list[RuleCatalogueEntry]])
async def list_rules(service: RuleService = Depends(get_rule_service)):
    """List the rule set in evaluation order."""
    return {"data": service.catalogue()}


@router.get("/fixtures", response_model=DataResponse[list[str]])
async def list_replay_fixtures():
    return {"data": list_fixtures()}


@router.post("/replay", response_model=ReplayResponse)
async def replay_snapshot(
    data: ReplayRequest,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: RuleService = Depends(get_rule_service),
):
    """
    Evaluate a posted snapshot against the rule set.

    With ``materialize: true`` matched records are stored as events (and
    tickets where the rule asks for one).
    """
    return await service.replay_snapshot(session, data, resolve_correlation_id(x_correlation_id))


@router.post("/replay/{fixture}", response_model=ReplayResponse)
async def replay_named_fixture(
    fixture: str,
    service: RuleService = Depends(get_rule_service),
):
    """Replay a catalogue fixture stamped with the current time."""
    try:
        return service.replay_named(fixture)
    except UnknownFixtureError as e:
        raise HTTPException(status_code=404, detail=str(e))
