"""Repositories for data access."""

from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.models import (
    ActorType,
    Asset,
    AssetStatus,
    ControlAction,
    EventRecord,
    EventSeverity,
    EventStatus,
    EvidencePack,
    Site,
    TargetType,
    TelemetryPoint,
    Tenant,
    Ticket,
    TicketStatus,
    Zone,
)


class TenantRepository:
    """Repository for Tenant entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str) -> Tenant:
        """Create a new tenant."""
        tenant = Tenant(name=name)
        self.session.add(tenant)
        await self.session.flush()
        return tenant

    async def get_by_id(self, tenant_id: str) -> Tenant | None:
        """Get tenant by ID."""
        result = await self.session.execute(select(Tenant).where(Tenant.id == tenant_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[Tenant]:
        """List all tenants."""
        result = await self.session.execute(select(Tenant).order_by(Tenant.created_at))
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Tenant.id)))
        return result.scalar_one()


class SiteRepository:
    """Repository for Site and Zone entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        tenant_id: str,
        name: str,
        timezone: str,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> Site:
        """Create a new site."""
        site = Site(tenant_id=tenant_id, name=name, timezone=timezone, latitude=latitude, longitude=longitude)
        self.session.add(site)
        await self.session.flush()
        return site

    async def list_by_tenant(self, tenant_id: str) -> Sequence[Site]:
        """List sites of a tenant."""
        result = await self.session.execute(
            select(Site).where(Site.tenant_id == tenant_id).order_by(Site.created_at)
        )
        return result.scalars().all()

    async def create_zone(self, tenant_id: str, site_id: str, name: str, type: str) -> Zone:
        """Create a zone within a site."""
        zone = Zone(tenant_id=tenant_id, site_id=site_id, name=name, type=type)
        self.session.add(zone)
        await self.session.flush()
        return zone

    async def list_zones(self, tenant_id: str, site_id: str) -> Sequence[Zone]:
        """List zones of a site."""
        result = await self.session.execute(
            select(Zone).where(Zone.tenant_id == tenant_id, Zone.site_id == site_id).order_by(Zone.created_at)
        )
        return result.scalars().all()


class AssetRepository:
    """Repository for Asset entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, tenant_id: str, **fields) -> Asset:
        """Create a new asset."""
        asset = Asset(tenant_id=tenant_id, **fields)
        self.session.add(asset)
        await self.session.flush()
        return asset

    async def get_by_id_or_tag(self, asset_ref: str) -> Asset | None:
        """Get asset by ID or by asset tag."""
        result = await self.session.execute(
            select(Asset).where(or_(Asset.id == asset_ref, Asset.asset_tag == asset_ref)).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_tag(self, tenant_id: str, asset_tag: str) -> Asset | None:
        """Get asset by tenant and tag."""
        result = await self.session.execute(
            select(Asset).where(Asset.tenant_id == tenant_id, Asset.asset_tag == asset_tag)
        )
        return result.scalar_one_or_none()

    async def list_by_tenant(
        self,
        tenant_id: str,
        site_id: str | None = None,
        zone_id: str | None = None,
        status: AssetStatus | None = None,
    ) -> Sequence[Asset]:
        """List a tenant's assets, optionally filtered by site, zone and status."""
        query = select(Asset).where(Asset.tenant_id == tenant_id)
        if site_id:
            query = query.where(Asset.site_id == site_id)
        if zone_id:
            query = query.where(Asset.zone_id == zone_id)
        if status:
            query = query.where(Asset.status == status)

        result = await self.session.execute(query.order_by(Asset.asset_tag))
        return result.scalars().all()

    async def update(self, asset: Asset) -> Asset:
        """Flush pending changes on an asset."""
        await self.session.flush()
        return asset


class EventRepository:
    """Repository for EventRecord entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: EventRecord) -> EventRecord:
        """Insert an event."""
        self.session.add(event)
        await self.session.flush()
        return event

    async def get_by_id(self, event_id: str) -> EventRecord | None:
        """Get event by ID."""
        result = await self.session.execute(select(EventRecord).where(EventRecord.id == event_id))
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        tenant_id: str | None = None,
        status: EventStatus | None = None,
        severity: EventSeverity | None = None,
    ) -> Sequence[EventRecord]:
        """List events matching all given filters, newest first."""
        query = select(EventRecord)
        if tenant_id:
            query = query.where(EventRecord.tenant_id == tenant_id)
        if status:
            query = query.where(EventRecord.status == status)
        if severity:
            query = query.where(EventRecord.severity == severity)

        result = await self.session.execute(query.order_by(EventRecord.detected_at.desc()))
        return result.scalars().all()

    async def update(self, event: EventRecord) -> EventRecord:
        await self.session.flush()
        return event


class TicketRepository:
    """Repository for Ticket entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, ticket: Ticket) -> Ticket:
        """Insert a ticket."""
        self.session.add(ticket)
        await self.session.flush()
        return ticket

    async def get_by_id(self, ticket_id: str) -> Ticket | None:
        """Get ticket by ID."""
        result = await self.session.execute(select(Ticket).where(Ticket.id == ticket_id))
        return result.scalar_one_or_none()

    async def list_filtered(
        self, tenant_id: str | None = None, status: TicketStatus | None = None
    ) -> Sequence[Ticket]:
        """List tickets matching all given filters, newest first."""
        query = select(Ticket)
        if tenant_id:
            query = query.where(Ticket.tenant_id == tenant_id)
        if status:
            query = query.where(Ticket.status == status)

        result = await self.session.execute(query.order_by(Ticket.opened_at.desc()))
        return result.scalars().all()

    async def update(self, ticket: Ticket) -> Ticket:
        await self.session.flush()
        return ticket


class ControlActionRepository:
    """
    Repository for the append-only control-action ledger.

    There is deliberately no update or delete: history is the full ordered
    sequence of appended rows.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, action: ControlAction) -> ControlAction:
        """Append one action."""
        self.session.add(action)
        await self.session.flush()
        return action

    async def list_filtered(
        self,
        tenant_id: str | None = None,
        target_type: TargetType | None = None,
        target_id: str | None = None,
        actor_type: ActorType | None = None,
    ) -> Sequence[ControlAction]:
        """
        List actions matching all given filters (equality, AND-combined).

        Args:
            tenant_id: Tenant to restrict to
            target_type: Level of the estate hierarchy
            target_id: Target entity id
            actor_type: Restrict to user or system actions

        Returns:
            Matching actions in insertion order
        """
        query = select(ControlAction)
        if tenant_id:
            query = query.where(ControlAction.tenant_id == tenant_id)
        if target_type:
            query = query.where(ControlAction.target_type == target_type)
        if target_id:
            query = query.where(ControlAction.target_id == target_id)
        if actor_type:
            query = query.where(ControlAction.actor_type == actor_type)

        result = await self.session.execute(query.order_by(ControlAction.seq))
        return result.scalars().all()


class TelemetryRepository:
    """Repository for ingested telemetry points."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append_many(self, points: list[TelemetryPoint]) -> int:
        """Insert a batch of points and return how many were stored."""
        self.session.add_all(points)
        await self.session.flush()
        return len(points)


class EvidencePackRepository:
    """Repository for EvidencePack entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, pack: EvidencePack) -> EvidencePack:
        """Insert an evidence pack."""
        self.session.add(pack)
        await self.session.flush()
        return pack

    async def get_by_id(self, pack_id: str) -> EvidencePack | None:
        """Get evidence pack by ID."""
        result = await self.session.execute(select(EvidencePack).where(EvidencePack.id == pack_id))
        return result.scalar_one_or_none()
