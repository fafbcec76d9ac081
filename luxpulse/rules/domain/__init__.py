"""Domain layer for rule evaluation."""

from luxpulse.rules.domain.exceptions import (
    InvalidRuleSetError,
    RuleError,
    RuleEvaluationError,
    UnknownFixtureError,
)
from luxpulse.rules.domain.models import (
    NO_MATCH,
    RuleDefinition,
    RuleExecutionRecord,
    RuleOutcome,
    Severity,
    TelemetryReading,
    TelemetrySnapshot,
)
from luxpulse.rules.domain.protocols import ExecutionSink, IdentifierFactory

__all__ = [
    "NO_MATCH",
    "RuleDefinition",
    "RuleExecutionRecord",
    "RuleOutcome",
    "Severity",
    "TelemetryReading",
    "TelemetrySnapshot",
    "ExecutionSink",
    "IdentifierFactory",
    "RuleError",
    "RuleEvaluationError",
    "InvalidRuleSetError",
    "UnknownFixtureError",
]
