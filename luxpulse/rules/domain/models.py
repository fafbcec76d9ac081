"""Domain models for rule evaluation."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NO_MATCH = "no match"


class Severity(str, Enum):
    """Severity attached to a rule outcome."""

    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class TelemetryReading:
    """Telemetry values the built-in rules read."""

    heartbeat_age_minutes: float
    power_watts: float
    expected_power_watts: float
    fault_count_24h: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TelemetryReading":
        """Build from the camelCase wire form."""
        return cls(
            heartbeat_age_minutes=data["heartbeatAgeMinutes"],
            power_watts=data["powerWatts"],
            expected_power_watts=data["expectedPowerWatts"],
            fault_count_24h=data["faultCount24h"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "heartbeatAgeMinutes": self.heartbeat_age_minutes,
            "powerWatts": self.power_watts,
            "expectedPowerWatts": self.expected_power_watts,
            "faultCount24h": self.fault_count_24h,
        }


@dataclass(frozen=True)
class TelemetrySnapshot:
    """
    Input to a single rule evaluation call.

    ``now`` is the evaluation time (ISO-8601). It is copied into every execution
    record instead of the wall clock so that replays stay reproducible.
    """

    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    now: str
    telemetry: TelemetryReading

    @property
    def input_ref(self) -> str:
        """Opaque reference back to the input that produced a record."""
        return f"replay:{self.asset_id}:{self.now}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TelemetrySnapshot":
        """Build from the camelCase wire form."""
        return cls(
            tenant_id=data["tenantId"],
            site_id=data["siteId"],
            zone_id=data["zoneId"],
            asset_id=data["assetId"],
            now=data["now"],
            telemetry=TelemetryReading.from_dict(data["telemetry"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tenantId": self.tenant_id,
            "siteId": self.site_id,
            "zoneId": self.zone_id,
            "assetId": self.asset_id,
            "now": self.now,
            "telemetry": self.telemetry.to_dict(),
        }


@dataclass(frozen=True)
class RuleOutcome:
    """What a matching rule reports. Never stored directly."""

    event_type: str
    severity: Severity
    open_ticket: bool
    reason: str


RulePredicate = Callable[[TelemetrySnapshot], RuleOutcome | None]


@dataclass(frozen=True)
class RuleDefinition:
    """A named, versioned predicate over a telemetry snapshot."""

    id: str
    version: int
    enabled: bool
    description: str
    evaluate: RulePredicate = field(repr=False, compare=False)
    condition: dict[str, Any] = field(default_factory=dict, compare=False)
    action: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class RuleExecutionRecord:
    """Auditable result of running one rule against one snapshot."""

    rule_id: str
    rule_version: int
    executed_at: str
    input_ref: str
    output_event_id: str | None
    output_ticket_id: str | None
    outcome: str
    error: str | None = None
    # Carried for event/ticket materialisation; not part of the wire form.
    event_type: str | None = None
    severity: Severity | None = None

    @property
    def matched(self) -> bool:
        return self.output_event_id is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire form used in logs and API responses."""
        data = {
            "ruleId": self.rule_id,
            "ruleVersion": self.rule_version,
            "executedAt": self.executed_at,
            "inputRef": self.input_ref,
            "outputEventId": self.output_event_id,
            "outputTicketId": self.output_ticket_id,
            "outcome": self.outcome,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
