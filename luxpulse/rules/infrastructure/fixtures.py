"""Named replay fixtures.

Each fixture is a fixed telemetry input used to replay the rule engine. ``now``
is stamped at lookup time so the worker can replay the same fixture every tick.
"""

from dataclasses import replace
from datetime import datetime, timezone

from luxpulse.rules.domain.exceptions import UnknownFixtureError
from luxpulse.rules.domain.models import TelemetryReading, TelemetrySnapshot

FIXTURE_EPOCH = "2026-02-22T09:00:00.000Z"

_DEMO_SCOPE = {
    "tenant_id": "demo-tenant",
    "site_id": "site-london-west",
    "zone_id": "zone-a",
    "asset_id": "LUX-0003",
}

FIXTURES: dict[str, TelemetrySnapshot] = {
    # What the worker replays on every tick: offline and repeated-fault rules fire
    "offline-event-ticket": TelemetrySnapshot(
        **_DEMO_SCOPE,
        now=FIXTURE_EPOCH,
        telemetry=TelemetryReading(
            heartbeat_age_minutes=14,
            power_watts=520,
            expected_power_watts=420,
            fault_count_24h=3,
        ),
    ),
    "asset-offline": TelemetrySnapshot(
        **_DEMO_SCOPE,
        now=FIXTURE_EPOCH,
        telemetry=TelemetryReading(
            heartbeat_age_minutes=11,
            power_watts=0,
            expected_power_watts=420,
            fault_count_24h=0,
        ),
    ),
    "repeated-fault": TelemetrySnapshot(
        **_DEMO_SCOPE,
        now=FIXTURE_EPOCH,
        telemetry=TelemetryReading(
            heartbeat_age_minutes=2,
            power_watts=520,
            expected_power_watts=420,
            fault_count_24h=3,
        ),
    ),
    "healthy": TelemetrySnapshot(
        **_DEMO_SCOPE,
        now=FIXTURE_EPOCH,
        telemetry=TelemetryReading(
            heartbeat_age_minutes=1,
            power_watts=418,
            expected_power_watts=420,
            fault_count_24h=0,
        ),
    ),
}


def to_iso_z(value: datetime) -> str:
    """Aware datetime in the millisecond ISO-8601 UTC form used across the API."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso_z(datetime.now(timezone.utc))


def list_fixtures() -> list[str]:
    return list(FIXTURES)


def get_fixture(name: str, now: str | None = None) -> TelemetrySnapshot:
    """
    Look up a fixture by name.

    Args:
        name: Fixture name
        now: Evaluation time to stamp on the snapshot (keeps the fixture's own when None)

    Returns:
        Telemetry snapshot for the fixture

    Raises:
        UnknownFixtureError: If the name is not in the catalogue
    """
    try:
        snapshot = FIXTURES[name]
    except KeyError:
        raise UnknownFixtureError(name, list_fixtures()) from None

    if now is None:
        return snapshot
    return replace(snapshot, now=now)
