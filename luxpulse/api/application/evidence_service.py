"""Service for compliance evidence packs."""

import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.exceptions import RequestValidationFailed, ResourceNotFoundException
from luxpulse.api.domain.models import EvidencePack, EvidencePackStatus, utc_now
from luxpulse.api.domain.schemas import EvidenceDownloadResponse, EvidencePackCreate, EvidencePackResponse
from luxpulse.api.infrastructure.repositories import EvidencePackRepository
from luxpulse.rules.infrastructure.fixtures import to_iso_z
from luxpulse.worker.evidence import EvidencePackRequest, build_evidence_pack_manifest


class EvidencePackService:
    """Service for building and reading evidence packs."""

    def __init__(self, artifact_prefix: str):
        self.artifact_prefix = artifact_prefix.rstrip("/")

    async def create(self, session: AsyncSession, data: EvidencePackCreate) -> EvidencePackResponse:
        """
        Build the manifest for a site and period and store the pack as ``ready``.

        Args:
            session: Database session
            data: Validated pack request

        Returns:
            The stored pack

        Raises:
            RequestValidationFailed: If the period ends before it starts
        """
        if data.period_end < data.period_start:
            raise RequestValidationFailed(
                "periodEnd must not be before periodStart",
                details={"periodStart": to_iso_z(data.period_start), "periodEnd": to_iso_z(data.period_end)},
            )

        manifest = build_evidence_pack_manifest(
            EvidencePackRequest(
                tenant_id=data.tenant_id,
                site_id=data.site_id,
                period_start=to_iso_z(data.period_start),
                period_end=to_iso_z(data.period_end),
            )
        )

        pack_id = str(uuid.uuid4())
        created_at = utc_now()
        pack = EvidencePack(
            id=pack_id,
            tenant_id=data.tenant_id,
            site_id=data.site_id,
            requested_by=data.requested_by,
            period_start=data.period_start,
            period_end=data.period_end,
            status=EvidencePackStatus.READY,
            manifest_json={"id": pack_id, **manifest.to_dict()},
            artifact_ref=f"{self.artifact_prefix}/{pack_id}.zip",
            created_at=created_at,
            completed_at=created_at,
        )
        await EvidencePackRepository(session).create(pack)

        logger.info(
            f"✓ Evidence pack {pack_id} ready for {data.tenant_id}/{data.site_id} (requested by {data.requested_by})"
        )
        return EvidencePackResponse.model_validate(pack)

    async def get(self, session: AsyncSession, pack_id: str) -> EvidencePackResponse:
        return EvidencePackResponse.model_validate(await self._get_or_raise(session, pack_id))

    async def download(self, session: AsyncSession, pack_id: str) -> EvidenceDownloadResponse:
        """Artefact reference and manifest of a pack."""
        pack = await self._get_or_raise(session, pack_id)
        return EvidenceDownloadResponse(artifact_ref=pack.artifact_ref, manifest=pack.manifest_json)

    async def _get_or_raise(self, session: AsyncSession, pack_id: str) -> EvidencePack:
        pack = await EvidencePackRepository(session).get_by_id(pack_id)
        if not pack:
            raise ResourceNotFoundException("Evidence pack", pack_id)
        return pack
