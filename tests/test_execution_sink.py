"""Tests for execution record sinks."""

from luxpulse.rules.application.engine import evaluate_rules
from luxpulse.rules.domain.models import RuleDefinition
from luxpulse.rules.infrastructure.execution_sink import CSVExecutionSink, InMemoryExecutionSink
from tests.conftest import make_snapshot


def _records(**telemetry):
    return list(evaluate_rules(make_snapshot(**telemetry)))


def test_in_memory_sink_collects_records():
    sink = InMemoryExecutionSink()

    sink.write_records(_records(fault_count_24h=3))
    sink.write_records(_records())

    assert len(sink) == 6
    df = sink.to_dataframe()
    assert list(df["ruleId"][:3]) == ["offline-threshold", "power-anomaly", "repeated-fault-pattern"]
    assert df["outcome"].iloc[2] == "Fault count in 24h is 3"


def test_in_memory_sink_drops_oldest_records():
    sink = InMemoryExecutionSink(max_records=4)

    sink.write_records(_records(fault_count_24h=3))
    sink.write_records(_records())

    assert len(sink) == 4
    assert [r.rule_id for r in sink.records] == [
        "repeated-fault-pattern",
        "offline-threshold",
        "power-anomaly",
        "repeated-fault-pattern",
    ]
    assert sink.records[0].matched


def test_in_memory_sink_starts_empty():
    assert InMemoryExecutionSink().to_dataframe().empty


def test_csv_sink_buffers_until_flush(tmp_path):
    path = tmp_path / "records.csv"
    sink = CSVExecutionSink(str(path), mode="w", buffer_size=10)

    sink.write_records(_records(heartbeat_age_minutes=14))
    assert not path.exists()

    sink.flush()
    df = sink.to_dataframe()
    assert len(df) == 3
    assert list(df.columns) == CSVExecutionSink.COLUMNS
    assert df["outcome"].iloc[0] == "Heartbeat age 14m exceeds threshold"


def test_csv_sink_flushes_when_buffer_full(tmp_path):
    path = tmp_path / "records.csv"
    sink = CSVExecutionSink(str(path), mode="w", buffer_size=3)

    sink.write_records(_records())

    assert len(sink.to_dataframe()) == 3


def test_csv_sink_appends_without_repeating_header(tmp_path):
    path = tmp_path / "records.csv"
    first = CSVExecutionSink(str(path), mode="w", buffer_size=1)
    first.write_records(_records())

    second = CSVExecutionSink(str(path), mode="a", buffer_size=1)
    second.write_records(_records(fault_count_24h=4))

    df = second.to_dataframe()
    assert len(df) == 6
    assert (df["ruleId"] == "ruleId").sum() == 0


def test_csv_sink_keeps_error_column(tmp_path):
    def broken(snapshot):
        raise ValueError("bad telemetry")

    rules = [RuleDefinition(id="broken", version=1, enabled=True, description="Fails", evaluate=broken)]
    sink = CSVExecutionSink(str(tmp_path / "errors.csv"), mode="w", buffer_size=1)

    sink.write_records(list(evaluate_rules(make_snapshot(), rules=rules)))

    df = sink.to_dataframe()
    assert df["outcome"].iloc[0] == "error: ValueError: bad telemetry"
    assert "broken v1" in df["error"].iloc[0]


def test_csv_sink_missing_file_reads_empty(tmp_path):
    sink = CSVExecutionSink(str(tmp_path / "never-written.csv"))

    assert sink.to_dataframe().empty
