"""Replay harness: re-run the engine against a named input."""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from luxpulse.rules.application.engine import RuleEngine
from luxpulse.rules.domain.models import RuleExecutionRecord, TelemetrySnapshot


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of one replay."""

    fixture: str
    input: TelemetrySnapshot
    result: tuple[RuleExecutionRecord, ...]

    @property
    def matched(self) -> tuple[RuleExecutionRecord, ...]:
        return tuple(record for record in self.result if record.matched)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixture": self.fixture,
            "input": self.input.to_dict(),
            "result": [record.to_dict() for record in self.result],
        }


def replay_fixture(name: str, snapshot: TelemetrySnapshot, engine: RuleEngine | None = None) -> ReplayResult:
    """
    Evaluate a snapshot once under a fixture name.

    No caching: every call runs the engine again, so with the default identifier
    factory two replays of the same input carry different event/ticket ids.

    Args:
        name: Fixture name, echoed back in the result
        snapshot: Input to evaluate
        engine: Engine to use (a built-in rule engine when None)

    Returns:
        ReplayResult with the input and the execution records
    """
    engine = engine or RuleEngine()
    result = engine.evaluate(snapshot)

    logger.debug(
        f"Replayed fixture '{name}' for {snapshot.input_ref}: "
        f"{sum(1 for r in result if r.matched)}/{len(result)} rules matched"
    )

    return ReplayResult(fixture=name, input=snapshot, result=result)
