"""Built-in fault-detection rule set.

The set is a fixed, auditable list. Declaration order is part of the contract:
records come out in this order and worker logs and replay fixtures are diffed
against it. Bump ``version`` whenever a predicate's logic changes.
"""

from collections.abc import Iterable, Iterator
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from luxpulse.rules.domain.exceptions import InvalidRuleSetError
from luxpulse.rules.domain.models import RuleDefinition, RuleOutcome, Severity, TelemetrySnapshot

OFFLINE_THRESHOLD_MINUTES = 10
POWER_DEVIATION_THRESHOLD = 0.25
REPEATED_FAULT_THRESHOLD = 3


def format_number(value: float) -> str:
    """Render a number the way it appears in reason strings (``11`` not ``11.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_percent(ratio: float) -> str:
    """
    Ratio as a percentage with one decimal, exact ties rounded up (``0.3125`` -> ``31.3``).

    ``Decimal(float)`` is the float's exact binary value, so only true ties round up.
    """
    return str(Decimal(ratio * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def power_deviation(power_watts: float, expected_power_watts: float) -> float:
    """Relative deviation from the expected draw, with the baseline floored at 1W."""
    return abs(power_watts - expected_power_watts) / max(expected_power_watts, 1)


def evaluate_offline_threshold(snapshot: TelemetrySnapshot) -> RuleOutcome | None:
    age = snapshot.telemetry.heartbeat_age_minutes
    if age > OFFLINE_THRESHOLD_MINUTES:
        return RuleOutcome(
            event_type="asset_offline",
            severity=Severity.CRITICAL,
            open_ticket=True,
            reason=f"Heartbeat age {format_number(age)}m exceeds threshold",
        )
    return None


def evaluate_power_anomaly(snapshot: TelemetrySnapshot) -> RuleOutcome | None:
    deviation = power_deviation(snapshot.telemetry.power_watts, snapshot.telemetry.expected_power_watts)
    if deviation > POWER_DEVIATION_THRESHOLD:
        return RuleOutcome(
            event_type="power_anomaly",
            severity=Severity.WARNING,
            open_ticket=True,
            reason=f"Power deviation {format_percent(deviation)}% exceeds 25%",
        )
    return None


def evaluate_repeated_fault_pattern(snapshot: TelemetrySnapshot) -> RuleOutcome | None:
    # Inclusive, unlike the two strict thresholds above.
    count = snapshot.telemetry.fault_count_24h
    if count >= REPEATED_FAULT_THRESHOLD:
        return RuleOutcome(
            event_type="repeated_fault_pattern",
            severity=Severity.WARNING,
            open_ticket=True,
            reason=f"Fault count in 24h is {format_number(count)}",
        )
    return None


def builtin_rules() -> tuple[RuleDefinition, ...]:
    """Return the built-in rule set in declaration order."""
    return (
        RuleDefinition(
            id="offline-threshold",
            version=3,
            enabled=True,
            description="No heartbeat over threshold minutes",
            evaluate=evaluate_offline_threshold,
            condition={"metric": "heartbeat", "noDataMinutes": OFFLINE_THRESHOLD_MINUTES},
            action={"eventType": "asset_offline", "severity": "critical", "openTicket": True},
        ),
        RuleDefinition(
            id="power-anomaly",
            version=2,
            enabled=True,
            description="Power draw anomaly versus expected baseline",
            evaluate=evaluate_power_anomaly,
            condition={"metric": "power_w", "deviationPct": int(POWER_DEVIATION_THRESHOLD * 100)},
            action={"eventType": "power_anomaly", "severity": "warning", "openTicket": True},
        ),
        RuleDefinition(
            id="repeated-fault-pattern",
            version=1,
            enabled=True,
            description="Repeated faults in rolling 24h window",
            evaluate=evaluate_repeated_fault_pattern,
            condition={"metric": "fault_count_24h", "minFaults": REPEATED_FAULT_THRESHOLD},
            action={"eventType": "repeated_fault_pattern", "severity": "warning", "openTicket": True},
        ),
    )


def validate_rule_set(rules: Iterable[RuleDefinition]) -> tuple[RuleDefinition, ...]:
    """
    Check a rule set before it is handed to the engine.

    Args:
        rules: Rule definitions in evaluation order

    Returns:
        The rules as a tuple, order preserved

    Raises:
        InvalidRuleSetError: On duplicate ids or a non-positive version
    """
    validated = tuple(rules)
    seen: set[str] = set()

    for rule in validated:
        if rule.id in seen:
            raise InvalidRuleSetError(f"Duplicate rule id '{rule.id}'")
        if rule.version < 1:
            raise InvalidRuleSetError(f"Rule '{rule.id}' has non-positive version {rule.version}")
        seen.add(rule.id)

    return validated


def with_enabled(
    rules: Iterable[RuleDefinition], rule_id: str, enabled: bool
) -> tuple[RuleDefinition, ...]:
    """Return a copy of ``rules`` with one rule switched on or off."""
    rules = tuple(rules)
    if rule_id not in {rule.id for rule in rules}:
        raise KeyError(f"Rule '{rule_id}' not in rule set")

    return tuple(replace(rule, enabled=enabled) if rule.id == rule_id else rule for rule in rules)


def describe_rules(rules: Iterable[RuleDefinition]) -> Iterator[dict[str, Any]]:
    """Yield catalogue entries for listing the rule set."""
    for rule in rules:
        yield {
            "id": rule.id,
            "version": rule.version,
            "enabled": rule.enabled,
            "description": rule.description,
            "condition": dict(rule.condition),
            "action": dict(rule.action),
        }
