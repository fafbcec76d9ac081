"""API routes for telemetry ingest."""

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.control_service import resolve_correlation_id
from luxpulse.api.application.telemetry_service import TelemetryService
from luxpulse.api.domain.schemas import TelemetryIngest, TelemetryIngestResponse
from luxpulse.api.infrastructure.database import get_db_session

router = APIRouter(tags=["telemetry"])


def get_telemetry_service() -> TelemetryService:
    """Dependency to get telemetry service."""
    return TelemetryService()


@router.post("/telemetry/ingest", response_model=TelemetryIngestResponse, status_code=202)
async def ingest_telemetry(
    data: TelemetryIngest,
    x_correlation_id: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
    service: TelemetryService = Depends(get_telemetry_service),
):
    """Store a batch of points; answers with the count accepted."""
    ingested = await service.ingest(session, data)
    return TelemetryIngestResponse(ingested=ingested, correlation_id=resolve_correlation_id(x_correlation_id))
