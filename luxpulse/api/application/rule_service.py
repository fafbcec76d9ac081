"""Service exposing the rule engine: catalogue, replay and materialisation."""

from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from luxpulse.api.domain.models import EventRecord, EventSeverity, Ticket, TicketPriority, TicketStatus
from luxpulse.api.domain.schemas import ReplayRequest, ReplayResponse, RuleCatalogueEntry
from luxpulse.api.infrastructure.repositories import EventRepository, TicketRepository
from luxpulse.rules.application.engine import RuleEngine
from luxpulse.rules.application.replay import ReplayResult, replay_fixture
from luxpulse.rules.domain.models import RuleExecutionRecord, Severity, TelemetryReading, TelemetrySnapshot
from luxpulse.rules.infrastructure.definitions import describe_rules
from luxpulse.rules.infrastructure.fixtures import get_fixture, to_iso_z, utc_now_iso


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class RuleResultMaterializer:
    """
    Turns matched execution records into stored events and tickets.

    The record's synthesised ids become the primary keys, so a record is
    materialised at most once.
    """

    def __init__(self, session: AsyncSession):
        self.event_repo = EventRepository(session)
        self.ticket_repo = TicketRepository(session)

    async def materialize(
        self, snapshot: TelemetrySnapshot, records: tuple[RuleExecutionRecord, ...], correlation_id: str
    ) -> tuple[list[EventRecord], list[Ticket]]:
        """
        Store an event for every matched record and a ticket where one was requested.

        Args:
            snapshot: Input the records were produced from (supplies the scope)
            records: Execution records of one evaluation pass
            correlation_id: Correlation id stamped on the events

        Returns:
            Tuple of (events, tickets) that were created
        """
        events: list[EventRecord] = []
        tickets: list[Ticket] = []
        detected_at = parse_iso(snapshot.now)

        for record in records:
            if not record.matched:
                continue
            if await self.event_repo.get_by_id(record.output_event_id):
                logger.debug(f"Event {record.output_event_id} already stored, skipping")
                continue

            event = await self.event_repo.create(
                EventRecord(
                    id=record.output_event_id,
                    tenant_id=snapshot.tenant_id,
                    site_id=snapshot.site_id,
                    zone_id=snapshot.zone_id,
                    asset_id=snapshot.asset_id,
                    type=record.event_type,
                    severity=EventSeverity(record.severity.value),
                    detected_at=detected_at,
                    rule_id=record.rule_id,
                    rule_version=record.rule_version,
                    correlation_id=correlation_id,
                    raw_payload_ref=record.input_ref,
                )
            )
            events.append(event)

            if record.output_ticket_id:
                ticket = await self.ticket_repo.create(
                    Ticket(
                        id=record.output_ticket_id,
                        tenant_id=snapshot.tenant_id,
                        site_id=snapshot.site_id,
                        zone_id=snapshot.zone_id,
                        asset_id=snapshot.asset_id,
                        source_event_id=event.id,
                        status=TicketStatus.OPEN,
                        priority=(
                            TicketPriority.CRITICAL if record.severity == Severity.CRITICAL else TicketPriority.MEDIUM
                        ),
                        opened_at=detected_at,
                    )
                )
                tickets.append(ticket)

        logger.info(f"✓ Materialised {len(events)} events and {len(tickets)} tickets for {snapshot.input_ref}")
        return events, tickets


class RuleService:
    """Service for the rule catalogue and replays."""

    def __init__(self, engine: RuleEngine):
        """
        Initialize service.

        Args:
            engine: Rule engine shared with the rest of the process
        """
        self.engine = engine

    def catalogue(self) -> list[RuleCatalogueEntry]:
        return [RuleCatalogueEntry(**entry) for entry in describe_rules(self.engine.rules)]

    async def replay_snapshot(
        self, session: AsyncSession, data: ReplayRequest, correlation_id: str
    ) -> ReplayResponse:
        """Replay a posted snapshot, optionally storing the resulting events and tickets."""
        snapshot = TelemetrySnapshot(
            tenant_id=data.tenant_id,
            site_id=data.site_id,
            zone_id=data.zone_id,
            asset_id=data.asset_id,
            now=to_iso_z(data.now) if data.now else utc_now_iso(),
            telemetry=TelemetryReading(
                heartbeat_age_minutes=data.telemetry.heartbeat_age_minutes,
                power_watts=data.telemetry.power_watts,
                expected_power_watts=data.telemetry.expected_power_watts,
                fault_count_24h=data.telemetry.fault_count_24h,
            ),
        )
        replay = replay_fixture(data.fixture, snapshot, engine=self.engine)

        if data.materialize:
            await RuleResultMaterializer(session).materialize(snapshot, replay.result, correlation_id)

        return self._to_response(replay)

    def replay_named(self, name: str, now: str | None = None) -> ReplayResponse:
        """Replay a catalogue fixture at ``now`` (current time when None)."""
        replay = replay_fixture(name, get_fixture(name, now=now or utc_now_iso()), engine=self.engine)
        return self._to_response(replay)

    @staticmethod
    def _to_response(replay: ReplayResult) -> ReplayResponse:
        return ReplayResponse.model_validate(replay.to_dict())
