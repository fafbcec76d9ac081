"""Rule evaluation engine and execution recorder."""

from collections.abc import Iterable

from loguru import logger

from luxpulse.rules.domain.exceptions import RuleEvaluationError
from luxpulse.rules.domain.models import (
    NO_MATCH,
    RuleDefinition,
    RuleExecutionRecord,
    RuleOutcome,
    TelemetrySnapshot,
)
from luxpulse.rules.domain.protocols import IdentifierFactory
from luxpulse.rules.infrastructure.definitions import builtin_rules, validate_rule_set
from luxpulse.rules.infrastructure.identifiers import RandomIdentifierFactory


class RuleEngine:
    """
    Applies every enabled rule to one telemetry snapshot.

    Evaluation is synchronous and pure apart from identifier generation: one
    record per enabled rule, in declaration order, no aggregation across rules.
    A predicate that raises is recorded as an error outcome for that rule only.
    """

    def __init__(
        self,
        rules: Iterable[RuleDefinition] | None = None,
        id_factory: IdentifierFactory | None = None,
    ):
        """
        Initialize rule engine.

        Args:
            rules: Rule set in evaluation order (defaults to the built-in set)
            id_factory: Event/ticket id strategy (defaults to fresh uuid4 ids)
        """
        self.rules = validate_rule_set(builtin_rules() if rules is None else rules)
        self.id_factory = id_factory or RandomIdentifierFactory()

        logger.debug(
            f"Initialized RuleEngine with {len(self.enabled_rules)}/{len(self.rules)} enabled rules"
        )

    @property
    def enabled_rules(self) -> tuple[RuleDefinition, ...]:
        return tuple(rule for rule in self.rules if rule.enabled)

    def evaluate(self, snapshot: TelemetrySnapshot) -> tuple[RuleExecutionRecord, ...]:
        """
        Evaluate the rule set against a snapshot.

        Args:
            snapshot: Fully populated telemetry snapshot (not validated here)

        Returns:
            Immutable sequence of execution records, one per enabled rule
        """
        records = []

        for rule in self.rules:
            if not rule.enabled:
                continue

            try:
                outcome = self._run_predicate(rule, snapshot)
            except RuleEvaluationError as e:
                logger.error(f"{e} (input {snapshot.input_ref})")
                records.append(self._error_record(rule, snapshot, e))
                continue

            records.append(self.record(rule, snapshot, outcome))

        return tuple(records)

    def record(
        self, rule: RuleDefinition, snapshot: TelemetrySnapshot, outcome: RuleOutcome | None
    ) -> RuleExecutionRecord:
        """Wrap one rule's outcome into an execution record with synthesised ids."""
        input_ref = snapshot.input_ref
        event_id = self.id_factory.event_id(rule.id, input_ref) if outcome else None
        ticket_id = (
            self.id_factory.ticket_id(rule.id, input_ref) if outcome and outcome.open_ticket else None
        )

        return RuleExecutionRecord(
            rule_id=rule.id,
            rule_version=rule.version,
            executed_at=snapshot.now,
            input_ref=input_ref,
            output_event_id=event_id,
            output_ticket_id=ticket_id,
            outcome=outcome.reason if outcome else NO_MATCH,
            event_type=outcome.event_type if outcome else None,
            severity=outcome.severity if outcome else None,
        )

    @staticmethod
    def _run_predicate(rule: RuleDefinition, snapshot: TelemetrySnapshot) -> RuleOutcome | None:
        try:
            return rule.evaluate(snapshot)
        except Exception as e:
            raise RuleEvaluationError(rule.id, rule.version, e) from e

    @staticmethod
    def _error_record(
        rule: RuleDefinition, snapshot: TelemetrySnapshot, error: RuleEvaluationError
    ) -> RuleExecutionRecord:
        return RuleExecutionRecord(
            rule_id=rule.id,
            rule_version=rule.version,
            executed_at=snapshot.now,
            input_ref=snapshot.input_ref,
            output_event_id=None,
            output_ticket_id=None,
            outcome=error.outcome,
            error=str(error),
        )


def evaluate_rules(
    snapshot: TelemetrySnapshot, rules: Iterable[RuleDefinition] | None = None
) -> tuple[RuleExecutionRecord, ...]:
    """Evaluate a snapshot with a throwaway engine (built-in rules by default)."""
    return RuleEngine(rules=rules).evaluate(snapshot)
