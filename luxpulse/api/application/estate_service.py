"""Service for tenants, sites, zones and assets."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.exceptions import DuplicateAssetTagError, ResourceNotFoundException
from luxpulse.api.domain.models import AssetStatus
from luxpulse.api.domain.schemas import (
    AssetCreate,
    AssetResponse,
    AssetUpdate,
    SiteCreate,
    SiteResponse,
    TenantCreate,
    TenantResponse,
    ZoneCreate,
    ZoneResponse,
)
from luxpulse.api.infrastructure.repositories import AssetRepository, SiteRepository, TenantRepository


class EstateService:
    """Service for managing the estate hierarchy."""

    async def list_tenants(self, session: AsyncSession) -> list[TenantResponse]:
        repo = TenantRepository(session)
        return [TenantResponse.model_validate(t) for t in await repo.list_all()]

    async def create_tenant(self, session: AsyncSession, data: TenantCreate) -> TenantResponse:
        repo = TenantRepository(session)
        tenant = await repo.create(name=data.name)
        logger.info(f"✓ Created tenant: {tenant.name} (ID: {tenant.id})")
        return TenantResponse.model_validate(tenant)

    async def list_sites(self, session: AsyncSession, tenant_id: str) -> list[SiteResponse]:
        repo = SiteRepository(session)
        return [SiteResponse.model_validate(s) for s in await repo.list_by_tenant(tenant_id)]

    async def create_site(self, session: AsyncSession, tenant_id: str, data: SiteCreate) -> SiteResponse:
        await self._require_tenant(session, tenant_id)
        repo = SiteRepository(session)
        site = await repo.create(
            tenant_id=tenant_id,
            name=data.name,
            timezone=data.timezone,
            latitude=data.latitude,
            longitude=data.longitude,
        )
        logger.info(f"✓ Created site: {site.name} (ID: {site.id})")
        return SiteResponse.model_validate(site)

    async def list_zones(self, session: AsyncSession, tenant_id: str, site_id: str) -> list[ZoneResponse]:
        repo = SiteRepository(session)
        return [ZoneResponse.model_validate(z) for z in await repo.list_zones(tenant_id, site_id)]

    async def create_zone(
        self, session: AsyncSession, tenant_id: str, site_id: str, data: ZoneCreate
    ) -> ZoneResponse:
        await self._require_tenant(session, tenant_id)
        repo = SiteRepository(session)
        zone = await repo.create_zone(tenant_id, site_id, name=data.name, type=data.type)
        return ZoneResponse.model_validate(zone)

    async def list_assets(
        self,
        session: AsyncSession,
        tenant_id: str,
        site_id: str | None = None,
        zone_id: str | None = None,
        status: AssetStatus | None = None,
    ) -> list[AssetResponse]:
        """List a tenant's assets with optional site/zone/status filters."""
        repo = AssetRepository(session)
        assets = await repo.list_by_tenant(tenant_id, site_id=site_id, zone_id=zone_id, status=status)
        return [AssetResponse.model_validate(a) for a in assets]

    async def create_asset(self, session: AsyncSession, tenant_id: str, data: AssetCreate) -> AssetResponse:
        """
        Register an asset.

        Raises:
            ResourceNotFoundException: If the tenant does not exist
            DuplicateAssetTagError: If the tag is already used within the tenant
        """
        await self._require_tenant(session, tenant_id)
        repo = AssetRepository(session)

        if await repo.get_by_tag(tenant_id, data.asset_tag):
            raise DuplicateAssetTagError(tenant_id, data.asset_tag)

        try:
            asset = await repo.create(tenant_id, **data.model_dump(), status=AssetStatus.OK)
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same tag
            raise DuplicateAssetTagError(tenant_id, data.asset_tag) from e

        logger.info(f"✓ Registered asset {asset.asset_tag} (ID: {asset.id})")
        return AssetResponse.model_validate(asset)

    async def get_asset(self, session: AsyncSession, asset_ref: str) -> AssetResponse:
        """Get an asset by ID or asset tag."""
        asset = await self._require_asset(session, asset_ref)
        return AssetResponse.model_validate(asset)

    async def update_asset(self, session: AsyncSession, asset_ref: str, data: AssetUpdate) -> AssetResponse:
        """Patch status and/or last-seen time of an asset."""
        repo = AssetRepository(session)
        asset = await self._require_asset(session, asset_ref)

        if data.status is not None:
            asset.status = data.status
        if data.last_seen_at is not None:
            asset.last_seen_at = data.last_seen_at

        await repo.update(asset)
        return AssetResponse.model_validate(asset)

    async def _require_tenant(self, session: AsyncSession, tenant_id: str) -> None:
        if not await TenantRepository(session).get_by_id(tenant_id):
            raise ResourceNotFoundException("Tenant", tenant_id)

    async def _require_asset(self, session: AsyncSession, asset_ref: str):
        asset = await AssetRepository(session).get_by_id_or_tag(asset_ref)
        if not asset:
            raise ResourceNotFoundException("Asset", asset_ref)
        return asset
