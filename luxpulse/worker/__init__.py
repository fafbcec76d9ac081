"""Periodic rule evaluation worker."""

from luxpulse.worker.evidence import EvidencePackRequest, build_evidence_pack_manifest
from luxpulse.worker.tick import TickResult, WorkerStats, run_worker, run_worker_tick

__all__ = [
    "EvidencePackRequest",
    "build_evidence_pack_manifest",
    "TickResult",
    "WorkerStats",
    "run_worker",
    "run_worker_tick",
]
