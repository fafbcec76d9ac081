"""Demo estate seeding for development and demos."""

from datetime import timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.models import AssetStatus, utc_now
from luxpulse.api.infrastructure.repositories import AssetRepository, SiteRepository, TenantRepository

DEMO_SITES = [
    ("London West Retail Park", 51.5072, -0.1276),
    ("Birmingham Logistics Hub", 52.4862, -1.8904),
    ("Manchester Commerce Campus", 53.4808, -2.2426),
]

# (site index, name, type)
DEMO_ZONES = [
    (0, "Ground Floor Retail", "retail"),
    (0, "Loading Corridor", "logistics"),
    (1, "Dispatch Hall", "warehouse"),
    (2, "Atrium", "commercial"),
    (2, "Parking Deck", "outdoor"),
]

DEMO_ASSET_COUNT = 120


def _demo_status(index: int) -> AssetStatus:
    if index % 19 == 0:
        return AssetStatus.OFFLINE
    if index % 11 == 0:
        return AssetStatus.WARNING
    return AssetStatus.OK


async def seed_demo_estate(session: AsyncSession) -> bool:
    """
    Seed one tenant with three sites, five zones and 120 assets.

    Args:
        session: Database session

    Returns:
        False when the store already holds tenants and nothing was seeded
    """
    tenant_repo = TenantRepository(session)
    if await tenant_repo.count() > 0:
        logger.debug("Store already seeded, skipping demo estate")
        return False

    site_repo = SiteRepository(session)
    asset_repo = AssetRepository(session)
    now = utc_now()

    tenant = await tenant_repo.create(name="Demo FM Tenant")
    sites = [
        await site_repo.create(tenant.id, name, "Europe/London", latitude, longitude)
        for name, latitude, longitude in DEMO_SITES
    ]
    zones = [
        await site_repo.create_zone(tenant.id, sites[site_index].id, name, zone_type)
        for site_index, name, zone_type in DEMO_ZONES
    ]

    for i in range(DEMO_ASSET_COUNT):
        # Zone and site cycle independently, as in the field survey export
        await asset_repo.create(
            tenant.id,
            site_id=sites[i % len(sites)].id,
            zone_id=zones[i % len(zones)].id,
            asset_tag=f"LUX-{i + 1:04d}",
            serial_number=f"SN-{100000 + i}",
            manufacturer="VendorA" if i % 2 == 0 else "VendorB",
            model="Linear Bay D4" if i % 3 == 0 else "Panel L4",
            protocol_type="dali2" if i % 2 == 0 else "bacnet",
            status=_demo_status(i),
            last_seen_at=now - timedelta(minutes=i % 15),
        )

    logger.info(
        f"✓ Seeded demo estate: tenant {tenant.id}, {len(sites)} sites, "
        f"{len(zones)} zones, {DEMO_ASSET_COUNT} assets"
    )
    return True
