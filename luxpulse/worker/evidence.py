"""Evidence-pack manifest checksums.

Only the manifest is built here; bundling the artefacts themselves is done
elsewhere.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

EVIDENCE_ARTEFACTS: dict[str, tuple[str, str]] = {
    # checksum key: (file name, hash suffix)
    "asset_registry_snapshot": ("asset_registry_snapshot.json", "assets"),
    "config_snapshot": ("config_snapshot.json", "config"),
    "schedule_snapshot": ("schedule_snapshot.json", "schedules"),
    "override_log": ("override_log.csv", "overrides"),
    "fault_summary": ("fault_summary.json", "faults"),
    "kpi_summary": ("kpi_summary.json", "kpi"),
}


@dataclass(frozen=True)
class EvidencePackRequest:
    tenant_id: str
    site_id: str
    period_start: str
    period_end: str


@dataclass(frozen=True)
class EvidencePackManifest:
    generated_at: str
    includes: list[str] = field(default_factory=list)
    checksums: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"generatedAt": self.generated_at, "includes": list(self.includes), "checksums": dict(self.checksums)}


def build_evidence_pack_manifest(request: EvidencePackRequest) -> EvidencePackManifest:
    """
    Build the manifest for an evidence pack.

    Checksums are a deterministic SHA-256 of the request scope and the artefact
    suffix, so the same request always yields the same checksums.
    """
    base = f"{request.tenant_id}:{request.site_id}:{request.period_start}:{request.period_end}"

    return EvidencePackManifest(
        generated_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        includes=[filename for filename, _ in EVIDENCE_ARTEFACTS.values()],
        checksums={
            key: hashlib.sha256(f"{base}:{suffix}".encode("utf-8")).hexdigest()
            for key, (_, suffix) in EVIDENCE_ARTEFACTS.items()
        },
    )
