"""API routes for evidence packs."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.application.evidence_service import EvidencePackService
from luxpulse.api.domain.schemas import (
    DataResponse,
    EvidenceDownloadResponse,
    EvidencePackCreate,
    EvidencePackResponse,
)
from luxpulse.api.infrastructure.database import get_db_session
from luxpulse.config import ApiConfig

router = APIRouter(prefix="/evidence-packs", tags=["evidence"])


def get_evidence_service() -> EvidencePackService:
    """Dependency to get evidence pack service."""
    return EvidencePackService(artifact_prefix=ApiConfig().evidence_artifact_prefix)


@router.post("", response_model=DataResponse[EvidencePackResponse], status_code=202)
async def create_evidence_pack(
    data: EvidencePackCreate,
    session: AsyncSession = Depends(get_db_session),
    service: EvidencePackService = Depends(get_evidence_service),
):
    """Build an evidence pack for a site and period."""
    return {"data": await service.create(session, data)}


@router.get("/{pack_id}", response_model=DataResponse[EvidencePackResponse])
async def get_evidence_pack(
    pack_id: str,
    session: AsyncSession = Depends(get_db_session),
    service: EvidencePackService = Depends(get_evidence_service),
):
    return {"data": await service.get(session, pack_id)}


@router.get("/{pack_id}/download", response_model=DataResponse[EvidenceDownloadResponse])
async def download_evidence_pack(
    pack_id: str,
    session: AsyncSession = Depends(get_db_session),
    service: EvidencePackService = Depends(get_evidence_service),
):
    """Where the pack's artefact lives, with its manifest."""
    return {"data": await service.download(session, pack_id)}
