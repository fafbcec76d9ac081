"""Fault-detection rule evaluation package."""

from luxpulse.rules.application import ReplayResult, RuleEngine, evaluate_rules, replay_fixture
from luxpulse.rules.domain import (
    NO_MATCH,
    RuleDefinition,
    RuleExecutionRecord,
    RuleOutcome,
    Severity,
    TelemetryReading,
    TelemetrySnapshot,
)
from luxpulse.rules.infrastructure import (
    CSVExecutionSink,
    InMemoryExecutionSink,
    builtin_rules,
    get_fixture,
)

__all__ = [
    "RuleEngine",
    "evaluate_rules",
    "ReplayResult",
    "replay_fixture",
    "NO_MATCH",
    "RuleDefinition",
    "RuleExecutionRecord",
    "RuleOutcome",
    "Severity",
    "TelemetryReading",
    "TelemetrySnapshot",
    "CSVExecutionSink",
    "InMemoryExecutionSink",
    "builtin_rules",
    "get_fixture",
]
