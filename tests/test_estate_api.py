"""Tests for the estate, incident and rule endpoints."""

import pytest

API = "/api/v1"

ASSET_BODY = {
    "siteId": "site-1",
    "zoneId": "zone-1",
    "assetTag": "LUX-9001",
    "serialNumber": "SN-9001",
    "manufacturer": "VendorA",
    "model": "Panel L4",
    "protocolType": "dali2",
}

REPLAY_BODY = {
    "tenantId": "demo-tenant",
    "siteId": "site-london-west",
    "zoneId": "zone-a",
    "assetId": "LUX-0003",
    "now": "2026-02-22T09:00:00Z",
    "telemetry": {
        "heartbeatAgeMinutes": 11,
        "powerWatts": 0,
        "expectedPowerWatts": 420,
        "faultCount24h": 0,
    },
}


@pytest.fixture
def tenant_id(client):
    response = client.post(f"{API}/tenants", json={"name": "Acme Facilities"})
    assert response.status_code == 201
    return response.json()["data"]["id"]


def test_health(client):
    body = client.get("/health").json()

    assert body["ok"] is True
    assert body["service"] == "luxpulse-api"
    assert body["time"].endswith("Z")


def test_empty_store_has_no_tenants(client):
    assert client.get(f"{API}/tenants").json()["data"] == []


def test_demo_estate_is_seeded(seeded_client):
    tenants = seeded_client.get(f"{API}/tenants").json()["data"]
    assert [t["name"] for t in tenants] == ["Demo FM Tenant"]
    tenant = tenants[0]["id"]

    sites = seeded_client.get(f"{API}/tenants/{tenant}/sites").json()["data"]
    assert len(sites) == 3

    assets = seeded_client.get(f"{API}/tenants/{tenant}/assets").json()["data"]
    assert len(assets) == 120
    assert assets[0]["assetTag"] == "LUX-0001"
    assert assets[-1]["assetTag"] == "LUX-0120"

    offline = seeded_client.get(f"{API}/tenants/{tenant}/assets", params={"status": "Offline"}).json()["data"]
    assert len(offline) == 7


def test_site_and_zone_hierarchy(client, tenant_id):
    site = client.post(
        f"{API}/tenants/{tenant_id}/sites",
        json={"name": "Leeds Depot", "timezone": "Europe/London", "latitude": 53.8, "longitude": -1.55},
    )
    assert site.status_code == 201
    site_id = site.json()["data"]["id"]

    zone = client.post(f"{API}/tenants/{tenant_id}/sites/{site_id}/zones", json={"name": "Yard", "type": "outdoor"})
    assert zone.status_code == 201

    zones = client.get(f"{API}/tenants/{tenant_id}/sites/{site_id}/zones").json()["data"]
    assert [z["name"] for z in zones] == ["Yard"]


def test_site_for_unknown_tenant_is_404(client):
    response = client.post(f"{API}/tenants/missing/sites", json={"name": "Nowhere", "timezone": "UTC"})

    assert response.status_code == 404
    assert response.json()["error"] == "Tenant not found"


def test_register_asset_and_duplicate_tag(client, tenant_id):
    created = client.post(f"{API}/tenants/{tenant_id}/assets", json=ASSET_BODY)
    assert created.status_code == 201
    assert created.json()["data"]["status"] == "OK"

    duplicate = client.post(f"{API}/tenants/{tenant_id}/assets", json=ASSET_BODY)
    assert duplicate.status_code == 409
    assert duplicate.json()["details"]["asset_tag"] == "LUX-9001"

    assets = client.get(f"{API}/tenants/{tenant_id}/assets").json()["data"]
    assert len(assets) == 1


def test_same_tag_allowed_in_another_tenant(client, tenant_id):
    other = client.post(f"{API}/tenants", json={"name": "Other FM"}).json()["data"]["id"]

    assert client.post(f"{API}/tenants/{tenant_id}/assets", json=ASSET_BODY).status_code == 201
    assert client.post(f"{API}/tenants/{other}/assets", json=ASSET_BODY).status_code == 201


def test_invalid_asset_body_is_400(client, tenant_id):
    response = client.post(f"{API}/tenants/{tenant_id}/assets", json={**ASSET_BODY, "assetTag": "X"})

    assert response.status_code == 400


def test_get_and_patch_asset_by_tag(client, tenant_id):
    asset_id = client.post(f"{API}/tenants/{tenant_id}/assets", json=ASSET_BODY).json()["data"]["id"]

    by_tag = client.get(f"{API}/assets/LUX-9001").json()["data"]
    assert by_tag["id"] == asset_id

    patched = client.patch(
        f"{API}/assets/{asset_id}", json={"status": "Offline", "lastSeenAt": "2026-02-22T08:45:00Z"}
    )
    assert patched.status_code == 200
    assert patched.json()["data"]["status"] == "Offline"
    assert patched.json()["data"]["lastSeenAt"].startswith("2026-02-22T08:45:00")


def test_unknown_asset_is_404(client):
    assert client.get(f"{API}/assets/LUX-0000").status_code == 404


def test_ticket_lifecycle(client):
    created = client.post(
        f"{API}/tickets",
        json={
            "tenantId": "demo-tenant",
            "siteId": "site-london-west",
            "zoneId": "zone-a",
            "assetId": "LUX-0003",
            "priority": "high",
            "assignedTo": "tech.jones",
        },
    )
    assert created.status_code == 201
    ticket = created.json()["data"]
    assert ticket["status"] == "assigned"

    resolved = client.patch(
        f"{API}/tickets/{ticket['id']}",
        json={"status": "resolved", "resolutionSummary": "Driver replaced"},
        headers={"x-correlation-id": "corr-ticket"},
    )
    assert resolved.status_code == 200
    assert resolved.json()["data"]["status"] == "resolved"
    assert resolved.json()["data"]["resolutionSummary"] == "Driver replaced"
    assert resolved.json()["correlationId"] == "corr-ticket"

    assert client.get(f"{API}/tickets", params={"status": "open"}).json()["data"] == []


def test_patch_unknown_ticket_is_404(client):
    assert client.patch(f"{API}/tickets/tkt-missing", json={"status": "closed"}).status_code == 404


def test_rule_catalogue(client):
    rules = client.get(f"{API}/rules").json()["data"]

    assert [(r["id"], r["version"], r["enabled"]) for r in rules] == [
        ("offline-threshold", 3, True),
        ("power-anomaly", 2, True),
        ("repeated-fault-pattern", 1, True),
    ]


def test_fixture_catalogue(client):
    assert "offline-event-ticket" in client.get(f"{API}/rules/fixtures").json()["data"]


def test_replay_without_materialize_stores_nothing(client):
    response = client.post(f"{API}/rules/replay", json=REPLAY_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["fixture"] == "adhoc"
    assert body["input"]["now"] == "2026-02-22T09:00:00.000Z"
    assert [r["outcome"] for r in body["result"]] == [
        "Heartbeat age 11m exceeds threshold",
        "Power deviation 100.0% exceeds 25%",
        "no match",
    ]
    assert client.get(f"{API}/events").json()["data"] == []


def test_replay_with_materialize_creates_events_and_tickets(client):
    response = client.post(
        f"{API}/rules/replay",
        json={**REPLAY_BODY, "materialize": True},
        headers={"x-correlation-id": "corr-replay"},
    )
    result = response.json()["result"]

    events = client.get(f"{API}/events").json()["data"]
    assert {e["id"] for e in events} == {result[0]["outputEventId"], result[1]["outputEventId"]}
    assert {e["correlationId"] for e in events} == {"corr-replay"}
    offline = next(e for e in events if e["ruleId"] == "offline-threshold")
    assert offline["type"] == "asset_offline"
    assert offline["severity"] == "critical"
    assert offline["status"] == "open"

    tickets = client.get(f"{API}/tickets").json()["data"]
    assert {t["id"] for t in tickets} == {result[0]["outputTicketId"], result[1]["outputTicketId"]}
    by_event = {t["sourceEventId"]: t for t in tickets}
    assert by_event[result[0]["outputEventId"]]["priority"] == "critical"
    assert by_event[result[1]["outputEventId"]]["priority"] == "medium"

    acknowledged = client.post(f"{API}/events/{offline['id']}/acknowledge")
    assert acknowledged.status_code == 200
    assert acknowledged.json()["data"]["status"] == "acknowledged"
    assert acknowledged.json()["data"]["acknowledgedAt"]


def test_replay_rejects_bad_telemetry(client):
    body = {**REPLAY_BODY, "telemetry": {**REPLAY_BODY["telemetry"], "faultCount24h": -1}}

    assert client.post(f"{API}/rules/replay", json=body).status_code == 400


def test_replay_named_fixture(client):
    response = client.post(f"{API}/rules/replay/repeated-fault")

    assert response.status_code == 200
    body = response.json()
    assert body["fixture"] == "repeated-fault"
    assert [r["ruleId"] for r in body["result"] if r["outputEventId"]] == ["repeated-fault-pattern"]


def test_replay_unknown_fixture_is_404(client):
    assert client.post(f"{API}/rules/replay/does-not-exist").status_code == 404


def test_acknowledge_unknown_event_is_404(client):
    assert client.post(f"{API}/events/evt-missing/acknowledge").status_code == 404
