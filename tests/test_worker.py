"""Tests for the rule evaluation worker."""

import asyncio

import pytest

from luxpulse.config import WorkerConfig
from luxpulse.rules.domain.exceptions import UnknownFixtureError
from luxpulse.rules.infrastructure.execution_sink import CSVExecutionSink, InMemoryExecutionSink
from luxpulse.rules.infrastructure.identifiers import DeterministicIdentifierFactory
from luxpulse.worker.__main__ import main
from luxpulse.worker.evidence import EVIDENCE_ARTEFACTS, EvidencePackRequest, build_evidence_pack_manifest
from luxpulse.worker.tick import (
    EVIDENCE_REQUEST,
    WorkerStats,
    build_engine,
    build_sink,
    run_worker,
    run_worker_tick,
)
from tests.conftest import NOW


def test_tick_replays_configured_fixture():
    config = WorkerConfig(fixture_name="repeated-fault")
    sink = InMemoryExecutionSink()

    result = run_worker_tick(build_engine(config), config, sink=sink, tick_id=7, now=NOW)

    assert result.tick_id == 7
    assert result.replay.fixture == "repeated-fault"
    assert result.replay.input.now == NOW
    assert [r.rule_id for r in result.replay.matched] == ["repeated-fault-pattern"]
    assert len(sink) == 3


def test_tick_stamps_current_time_by_default():
    config = WorkerConfig()

    result = run_worker_tick(build_engine(config), config)

    assert result.replay.input.now != NOW
    assert result.replay.input.now.endswith("Z")


def test_tick_unknown_fixture_raises():
    config = WorkerConfig(fixture_name="nope")

    with pytest.raises(UnknownFixtureError):
        run_worker_tick(build_engine(config), config)


def test_build_engine_honours_deterministic_ids():
    assert isinstance(build_engine(WorkerConfig(deterministic_ids=True)).id_factory, DeterministicIdentifierFactory)


def test_build_sink_selection(tmp_path):
    assert build_sink(WorkerConfig()) is None
    assert isinstance(build_sink(WorkerConfig(persist_results=True)), InMemoryExecutionSink)
    assert isinstance(
        build_sink(WorkerConfig(persist_results=True, results_csv_path=str(tmp_path / "r.csv"))),
        CSVExecutionSink,
    )


def test_run_worker_ticks_until_limit():
    config = WorkerConfig(tick_interval_seconds=0.01)
    sink = InMemoryExecutionSink()

    stats = asyncio.run(run_worker(config, sink=sink, max_ticks=2))

    assert stats.ticks_completed == 2
    assert stats.ticks_failed == 0
    assert stats.last.tick_id == 2
    assert len(sink) == 6
    # Fresh ids on every tick
    assert sink.records[0].output_event_id != sink.records[3].output_event_id


def test_run_worker_survives_failing_tick():
    config = WorkerConfig(tick_interval_seconds=0.01, fixture_name="nope")

    stats = asyncio.run(run_worker(config, max_ticks=2))

    assert stats.ticks_completed == 0
    assert stats.ticks_failed == 2
    assert stats.last is None


def test_unbounded_worker_keeps_only_latest_tick():
    config = WorkerConfig(tick_interval_seconds=0.001)
    sink = InMemoryExecutionSink(max_records=6)
    stats = WorkerStats()

    async def run_briefly():
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(run_worker(config, sink=sink, stats=stats), timeout=0.5)

    asyncio.run(run_briefly())

    assert stats.ticks_completed > 2
    assert stats.last.tick_id == stats.ticks_completed
    # History is capped however long the loop ran
    assert len(sink) == 6
    assert sink.records[-1].executed_at == stats.last.replay.input.now


def test_in_memory_history_is_capped_by_config():
    sink = build_sink(WorkerConfig(persist_results=True, history_size=4))

    run_worker_tick(build_engine(WorkerConfig()), WorkerConfig(), sink=sink, now=NOW)
    run_worker_tick(build_engine(WorkerConfig()), WorkerConfig(), sink=sink, now=NOW)

    assert len(sink) == 4
    assert [r.rule_id for r in sink.records][:2] == ["power-anomaly", "repeated-fault-pattern"]


def test_evidence_manifest_is_deterministic():
    first = build_evidence_pack_manifest(EVIDENCE_REQUEST)
    second = build_evidence_pack_manifest(EVIDENCE_REQUEST)

    assert first.checksums == second.checksums
    assert set(first.checksums) == set(EVIDENCE_ARTEFACTS)
    assert "override_log.csv" in first.includes
    assert all(len(value) == 64 for value in first.checksums.values())


def test_evidence_manifest_depends_on_scope():
    other = EvidencePackRequest(
        tenant_id="demo-tenant",
        site_id="site-manchester-north",
        period_start=EVIDENCE_REQUEST.period_start,
        period_end=EVIDENCE_REQUEST.period_end,
    )

    assert (
        build_evidence_pack_manifest(other).checksums["kpi_summary"]
        != build_evidence_pack_manifest(EVIDENCE_REQUEST).checksums["kpi_summary"]
    )


def test_cli_once_writes_csv(tmp_path, monkeypatch):
    path = tmp_path / "ticks.csv"
    monkeypatch.setenv("WORKER_RESULTS_CSV_PATH", str(path))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    assert main(["--once", "--fixture", "asset-offline"]) == 0

    contents = path.read_text()
    assert "Heartbeat age 11m exceeds threshold" in contents
    assert "Power deviation 100.0% exceeds 25%" in contents
