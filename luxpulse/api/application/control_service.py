"""Service for the append-only control-action ledger."""

import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.models import ActorType, ControlAction, TargetType, utc_now
from luxpulse.api.domain.schemas import (
    ConfigSnapshotResponse,
    ControlActionCreate,
    ControlActionEnvelope,
    ControlActionResponse,
)
from luxpulse.api.infrastructure.repositories import ControlActionRepository

SCHEDULE_CREATE = "schedule.create"
SCHEDULE_APPLY = "schedule.apply"
MANUAL_OVERRIDE = "manual.override"


def resolve_correlation_id(*candidates: str | None) -> str:
    """First non-blank candidate, else a fresh uuid4."""
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate
    return str(uuid.uuid4())


class ControlActionService:
    """Service for appending to and reading the control-action ledger."""

    async def append(
        self,
        session: AsyncSession,
        data: ControlActionCreate,
        action_type: str | None = None,
        header_correlation_id: str | None = None,
    ) -> ControlActionEnvelope:
        """
        Append one control action.

        Args:
            session: Database session
            data: Validated action description
            action_type: Action type stamped by a typed endpoint (overrides the body's)
            header_correlation_id: Value of the ``x-correlation-id`` header

        Returns:
            The stored record plus the resolved correlation id
        """
        resolved_type = action_type or data.action_type
        correlation_id = resolve_correlation_id(data.correlation_id, header_correlation_id)

        action = ControlAction(
            id=str(uuid.uuid4()),
            tenant_id=data.tenant_id,
            actor_type=data.actor_type,
            actor_id=data.actor_id,
            target_type=data.target_type,
            target_id=data.target_id,
            action_type=resolved_type,
            justification=data.justification,
            before_state_json=data.before_state_json,
            after_state_json=data.after_state_json,
            approval_json=data.approval_json,
            correlation_id=correlation_id,
            adapter_response_ref=None,
            created_at=utc_now(),
        )

        repo = ControlActionRepository(session)
        await repo.append(action)

        logger.info(
            f"✓ Ledger append {action.action_type} by {action.actor_type.value}:{action.actor_id} "
            f"on {action.target_type.value}:{action.target_id} (correlation {correlation_id})"
        )

        return ControlActionEnvelope(
            data=ControlActionResponse.model_validate(action),
            correlation_id=correlation_id,
        )

    async def history(
        self,
        session: AsyncSession,
        tenant_id: str | None = None,
        target_type: TargetType | None = None,
        target_id: str | None = None,
        actor_type: ActorType | None = None,
    ) -> list[ControlActionResponse]:
        """List ledger entries matching all given filters, in insertion order."""
        repo = ControlActionRepository(session)
        actions = await repo.list_filtered(
            tenant_id=tenant_id, target_type=target_type, target_id=target_id, actor_type=actor_type
        )
        return [ControlActionResponse.model_validate(a) for a in actions]

    async def config_snapshot(
        self, session: AsyncSession, tenant_id: str, site_id: str, at: str
    ) -> ConfigSnapshotResponse:
        """Group a site's schedule and override actions for a configuration snapshot."""
        actions = await self.history(session, tenant_id=tenant_id, target_id=site_id)

        return ConfigSnapshotResponse(
            tenant_id=tenant_id,
            site_id=site_id,
            as_of=at,
            schedules=[a for a in actions if "schedule" in a.action_type],
            overrides=[a for a in actions if "override" in a.action_type],
        )
