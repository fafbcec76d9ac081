"""API routes for tenants, sites, zones and assets."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.estate_service import EstateService
from luxpulse.api.domain.models import AssetStatus
from luxpulse.api.domain.schemas import (
    AssetCreate,
    AssetResponse,
    AssetUpdate,
    DataResponse,
    SiteCreate,
    SiteResponse,
    TenantCreate,
    TenantResponse,
    ZoneCreate,
    ZoneResponse,
)
from luxpulse.api.infrastructure.database import get_db_session

router = APIRouter(tags=["estate"])


def get_estate_service() -> EstateService:
    """Dependency to get estate service."""
    return EstateService()


@router.get("/tenants", response_model=DataResponse[list[TenantResponse]])
async def list_tenants(
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """List all tenants."""
    return {"data": await service.list_tenants(session)}


@router.post("/tenants", response_model=DataResponse[TenantResponse], status_code=201)
async def create_tenant(
    data: TenantCreate,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """Create a tenant."""
    return {"data": await service.create_tenant(session, data)}


@router.get("/tenants/{tenant_id}/sites", response_model=DataResponse[list[SiteResponse]])
async def list_sites(
    tenant_id: str,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    return {"data": await service.list_sites(session, tenant_id)}


@router.post("/tenants/{tenant_id}/sites", response_model=DataResponse[SiteResponse], status_code=201)
async def create_site(
    tenant_id: str,
    data: SiteCreate,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    return {"data": await service.create_site(session, tenant_id, data)}


@router.get("/tenants/{tenant_id}/sites/{site_id}/zones", response_model=DataResponse[list[ZoneResponse]])
async def list_zones(
    tenant_id: str,
    site_id: str,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    return {"data": await service.list_zones(session, tenant_id, site_id)}


@router.post(
    "/tenants/{tenant_id}/sites/{site_id}/zones", response_model=DataResponse[ZoneResponse], status_code=201
)
async def create_zone(
    tenant_id: str,
    site_id: str,
    data: ZoneCreate,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    return {"data": await service.create_zone(session, tenant_id, site_id, data)}


@router.get("/tenants/{tenant_id}/assets", response_model=DataResponse[list[AssetResponse]])
async def list_assets(
    tenant_id: str,
    site_id: str | None = Query(None, alias="siteId"),
    zone_id: str | None = Query(None, alias="zoneId"),
    status: AssetStatus | None = Query(None),
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """List a tenant's assets, filtered by site, zone and status."""
    return {"data": await service.list_assets(session, tenant_id, site_id=site_id, zone_id=zone_id, status=status)}


@router.post("/tenants/{tenant_id}/assets", response_model=DataResponse[AssetResponse], status_code=201)
async def create_asset(
    tenant_id: str,
    data: AssetCreate,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """
    Register an asset.

    Asset tags are unique per tenant; a duplicate answers 409.
    """
    return {"data": await service.create_asset(session, tenant_id, data)}


@router.get("/assets/{asset_ref}", response_model=DataResponse[AssetResponse])
async def get_asset(
    asset_ref: str,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """Get an asset by ID or asset tag."""
    return {"data": await service.get_asset(session, asset_ref)}


@router.patch("/assets/{asset_ref}", response_model=DataResponse[AssetResponse])
async def update_asset(
    asset_ref: str,
    data: AssetUpdate,
    session: AsyncSession = Depends(get_db_session),
    service: EstateService = Depends(get_estate_service),
):
    """Update status and/or last-seen time."""
    return {"data": await service.update_asset(session, asset_ref, data)}
