"""Service for telemetry ingest."""

import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.models import TelemetryPoint
from luxpulse.api.domain.schemas import TelemetryIngest
from luxpulse.api.infrastructure.repositories import TelemetryRepository


class TelemetryService:
    """Service for storing points pushed by field adapters."""

    async def ingest(self, session: AsyncSession, data: TelemetryIngest) -> int:
        """
        Store every point of a batch, each under its own id.

        Args:
            session: Database session
            data: Validated batch for one asset

        Returns:
            Number of points stored
        """
        points = [
            TelemetryPoint(
                id=str(uuid.uuid4()),
                tenant_id=data.tenant_id,
                site_id=data.site_id,
                zone_id=data.zone_id,
                asset_id=data.asset_id,
                ts=point.ts,
                metric_key=point.metric_key,
                metric_value=point.metric_value,
                unit=point.unit,
                quality=point.quality,
                adapter_id=data.adapter_id,
                raw_payload_ref=data.raw_payload_ref,
            )
            for point in data.points
        ]

        ingested = await TelemetryRepository(session).append_many(points)
        logger.info(f"✓ Ingested {ingested} points for asset {data.asset_id} from adapter {data.adapter_id}")
        return ingested
