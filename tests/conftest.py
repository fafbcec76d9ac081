"""Shared fixtures for the test suite."""

import pytest
from fastapi.testclient import TestClient

from luxpulse.rules.domain.models import TelemetryReading, TelemetrySnapshot

NOW = "2026-02-22T09:00:00.000Z"


def make_snapshot(
    heartbeat_age_minutes: float = 1,
    power_watts: float = 420,
    expected_power_watts: float = 420,
    fault_count_24h: int = 0,
    now: str = NOW,
    asset_id: str = "LUX-0003",
) -> TelemetrySnapshot:
    """Snapshot that matches no rule unless the telemetry says otherwise."""
    return TelemetrySnapshot(
        tenant_id="demo-tenant",
        site_id="site-london-west",
        zone_id="zone-a",
        asset_id=asset_id,
        now=now,
        telemetry=TelemetryReading(
            heartbeat_age_minutes=heartbeat_age_minutes,
            power_watts=power_watts,
            expected_power_watts=expected_power_watts,
            fault_count_24h=fault_count_24h,
        ),
    )


@pytest.fixture
def snapshot_factory():
    return make_snapshot


@pytest.fixture
def api_env(tmp_path, monkeypatch):
    """Point the API at a fresh SQLite file."""
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "luxpulse-test.db"))
    monkeypatch.setenv("API_SEED_DEMO_DATA", "false")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return tmp_path


@pytest.fixture
def client(api_env):
    """API client on an empty store."""
    from luxpulse.api.main_app import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(api_env, monkeypatch):
    """API client on a store seeded with the demo estate."""
    monkeypatch.setenv("API_SEED_DEMO_DATA", "true")
    from luxpulse.api.main_app import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def control_action_body():
    return {
        "tenantId": "demo-tenant",
        "actorType": "user",
        "actorId": "ops.manager",
        "targetType": "asset",
        "targetId": "LUX-0003",
        "actionType": "manual.override",
        "justification": "Night inspection task for aisle lighting",
        "beforeStateJson": {"dimLevel": 82, "scheduleVersion": 6},
        "afterStateJson": {"dimLevel": 70, "scheduleVersion": 6},
        "approvalJson": {"requested": False},
    }
