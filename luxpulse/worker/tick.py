"""Periodic rule evaluation worker."""

import asyncio
import json
from dataclasses import dataclass
from itertools import count

from loguru import logger

from luxpulse.api.infrastructure.logging import LoggingContext, log_with_context
from luxpulse.config import WorkerConfig
from luxpulse.rules.application.engine import RuleEngine
from luxpulse.rules.application.replay import ReplayResult, replay_fixture
from luxpulse.rules.domain.protocols import ExecutionSink
from luxpulse.rules.infrastructure.execution_sink import CSVExecutionSink, InMemoryExecutionSink
from luxpulse.rules.infrastructure.fixtures import get_fixture, utc_now_iso
from luxpulse.rules.infrastructure.identifiers import create_identifier_factory
from luxpulse.worker.evidence import EvidencePackManifest, EvidencePackRequest, build_evidence_pack_manifest

EVIDENCE_REQUEST = EvidencePackRequest(
    tenant_id="demo-tenant",
    site_id="site-london-west",
    period_start="2026-02-15T00:00:00.000Z",
    period_end="2026-02-22T23:59:59.999Z",
)


@dataclass(frozen=True)
class TickResult:
    """What one worker tick produced."""

    tick_id: int
    replay: ReplayResult
    manifest: EvidencePackManifest


def build_engine(config: WorkerConfig) -> RuleEngine:
    return RuleEngine(id_factory=create_identifier_factory(config.deterministic_ids))


def build_sink(config: WorkerConfig) -> ExecutionSink | None:
    """Sink selected by configuration (CSV wins over in-memory), or None."""
    if config.results_csv_path:
        return CSVExecutionSink(config.results_csv_path, mode="a", buffer_size=1)
    if config.persist_results:
        return InMemoryExecutionSink(max_records=config.history_size)
    return None


def run_worker_tick(
    engine: RuleEngine,
    config: WorkerConfig,
    sink: ExecutionSink | None = None,
    tick_id: int = 0,
    now: str | None = None,
) -> TickResult:
    """
    Run one tick: replay the configured fixture and log the results.

    Args:
        engine: Rule engine to evaluate with
        config: Worker configuration (fixture name)
        sink: Optional sink the execution records are written to
        tick_id: Sequence number of this tick, for log context
        now: Evaluation time (current UTC time when None)

    Returns:
        TickResult with the replay and the evidence manifest
    """
    with LoggingContext(tick_id=tick_id, fixture=config.fixture_name):
        snapshot = get_fixture(config.fixture_name, now=now or utc_now_iso())
        replay = replay_fixture(config.fixture_name, snapshot, engine=engine)

        records = [record.to_dict() for record in replay.result]
        logger.info(f"[worker] deterministic replay\n{json.dumps(records, indent=2)}")
        log_with_context(
            "info",
            f"[worker] {len(replay.matched)}/{len(replay.result)} rules matched",
            input_ref=snapshot.input_ref,
        )

        if sink is not None:
            sink.write_records(list(replay.result))

        manifest = build_evidence_pack_manifest(EVIDENCE_REQUEST)
        logger.info(f"[worker] evidence manifest checksums {json.dumps(manifest.checksums)}")

    return TickResult(tick_id=tick_id, replay=replay, manifest=manifest)


@dataclass
class WorkerStats:
    """Running totals of a worker loop. Only the latest tick is retained."""

    ticks_completed: int = 0
    ticks_failed: int = 0
    last: TickResult | None = None


async def run_worker(
    config: WorkerConfig,
    sink: ExecutionSink | None = None,
    max_ticks: int | None = None,
    stats: WorkerStats | None = None,
) -> WorkerStats:
    """
    Tick immediately, then every ``tick_interval_seconds``.

    Ticks are synchronous and finish before the next one is scheduled, so they
    never overlap. A failing tick is logged and the loop carries on.

    Args:
        config: Worker configuration
        sink: Where execution records go (chosen from config when None)
        max_ticks: Stop after this many ticks (run forever when None)
        stats: Totals to update in place (a fresh one when None)

    Returns:
        The loop's totals and its latest tick
    """
    engine = build_engine(config)
    sink = sink if sink is not None else build_sink(config)
    stats = stats if stats is not None else WorkerStats()

    logger.info(
        f"🚀 Worker started: fixture={config.fixture_name}, "
        f"interval={config.tick_interval_seconds}s, deterministic_ids={config.deterministic_ids}"
    )

    try:
        for tick_id in count(1):
            try:
                stats.last = run_worker_tick(engine, config, sink=sink, tick_id=tick_id)
                stats.ticks_completed += 1
            except Exception as e:
                stats.ticks_failed += 1
                logger.exception(f"[worker] tick {tick_id} failed: {e}")

            if max_ticks is not None and tick_id >= max_ticks:
                break
            await asyncio.sleep(config.tick_interval_seconds)
    finally:
        logger.info(f"🛑 Worker stopped: {stats.ticks_completed} ticks completed, {stats.ticks_failed} failed")

    return stats
