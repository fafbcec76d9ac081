"""Tests for the telemetry ingest and evidence-pack endpoints."""

import sqlite3
import uuid

import pytest

from luxpulse.worker.evidence import EVIDENCE_ARTEFACTS, build_evidence_pack_manifest
from luxpulse.worker.tick import EVIDENCE_REQUEST

API = "/api/v1"


@pytest.fixture
def ingest_body():
    return {
        "tenantId": "demo-tenant",
        "siteId": "site-london-west",
        "zoneId": "zone-retail-floor",
        "assetId": "LUX-0003",
        "adapterId": "dali2-gateway-01",
        "points": [
            {"ts": "2026-02-22T10:00:00Z", "metricKey": "heartbeat_age_minutes", "metricValue": 11, "unit": "min"},
            {
                "ts": "2026-02-22T10:00:00Z",
                "metricKey": "power_watts",
                "metricValue": 0,
                "unit": "W",
                "quality": "estimated",
            },
        ],
    }


@pytest.fixture
def evidence_body():
    return {
        "tenantId": "demo-tenant",
        "siteId": "site-london-west",
        "requestedBy": "compliance.lead",
        "periodStart": "2026-02-15T00:00:00.000Z",
        "periodEnd": "2026-02-22T23:59:59.999Z",
    }


def _stored_points(api_env):
    with sqlite3.connect(api_env / "luxpulse-test.db") as conn:
        return conn.execute(
            "SELECT id, metric_key, quality, adapter_id, raw_payload_ref FROM telemetry_points ORDER BY metric_key"
        ).fetchall()


def test_ingest_accepts_batch(client, api_env, ingest_body):
    response = client.post(f"{API}/telemetry/ingest", json=ingest_body)

    assert response.status_code == 202
    payload = response.json()
    assert payload["ingested"] == 2
    uuid.UUID(payload["correlationId"])

    rows = _stored_points(api_env)
    assert [(key, quality) for _, key, quality, _, _ in rows] == [
        ("heartbeat_age_minutes", "good"),
        ("power_watts", "estimated"),
    ]
    assert {adapter for _, _, _, adapter, _ in rows} == {"dali2-gateway-01"}
    assert all(ref is None for *_, ref in rows)
    assert rows[0][0] != rows[1][0]


def test_ingest_echoes_correlation_header(client, ingest_body):
    response = client.post(
        f"{API}/telemetry/ingest",
        json={**ingest_body, "rawPayloadRef": "minio://raw/batch-7.json"},
        headers={"x-correlation-id": "corr-ingest-7"},
    )

    assert response.status_code == 202
    assert response.json()["correlationId"] == "corr-ingest-7"


def test_ingest_empty_batch(client, ingest_body):
    response = client.post(f"{API}/telemetry/ingest", json={**ingest_body, "points": []})

    assert response.status_code == 202
    assert response.json()["ingested"] == 0


@pytest.mark.parametrize(
    "point",
    [
        {"ts": "yesterday", "metricKey": "power_watts", "metricValue": 0, "unit": "W"},
        {"ts": "2026-02-22T10:00:00Z", "metricKey": "power_watts", "metricValue": "lots", "unit": "W"},
        {"ts": "2026-02-22T10:00:00Z", "metricValue": 0, "unit": "W"},
    ],
)
def test_ingest_rejects_bad_point(client, api_env, ingest_body, point):
    body = {**ingest_body, "points": [ingest_body["points"][0], point]}

    response = client.post(f"{API}/telemetry/ingest", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert _stored_points(api_env) == []


def test_ingest_requires_adapter(client, ingest_body):
    body = {k: v for k, v in ingest_body.items() if k != "adapterId"}

    assert client.post(f"{API}/telemetry/ingest", json=body).status_code == 400


def test_evidence_pack_is_created_ready(client, evidence_body):
    response = client.post(f"{API}/evidence-packs", json=evidence_body)

    assert response.status_code == 202
    pack = response.json()["data"]
    uuid.UUID(pack["id"])
    assert pack["status"] == "ready"
    assert pack["requestedBy"] == "compliance.lead"
    assert pack["artifactRef"] == f"minio://evidence/{pack['id']}.zip"
    assert pack["completedAt"] == pack["createdAt"]

    manifest = pack["manifestJson"]
    assert manifest["id"] == pack["id"]
    assert manifest["includes"] == [filename for filename, _ in EVIDENCE_ARTEFACTS.values()]
    assert manifest["checksums"] == build_evidence_pack_manifest(EVIDENCE_REQUEST).checksums


def test_evidence_pack_can_be_read_back(client, evidence_body):
    created = client.post(f"{API}/evidence-packs", json=evidence_body).json()["data"]

    response = client.get(f"{API}/evidence-packs/{created['id']}")

    assert response.status_code == 200
    pack = response.json()["data"]
    assert pack["id"] == created["id"]
    assert pack["status"] == "ready"
    assert pack["manifestJson"] == created["manifestJson"]


def test_evidence_pack_download(client, evidence_body):
    created = client.post(f"{API}/evidence-packs", json=evidence_body).json()["data"]

    response = client.get(f"{API}/evidence-packs/{created['id']}/download")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "artifactRef": created["artifactRef"],
        "manifest": created["manifestJson"],
    }


@pytest.mark.parametrize("suffix", ["", "/download"])
def test_unknown_evidence_pack_is_404(client, suffix):
    response = client.get(f"{API}/evidence-packs/{uuid.uuid4()}{suffix}")

    assert response.status_code == 404
    assert response.json()["error"] == "Evidence pack not found"


def test_evidence_checksums_depend_on_scope_not_pack(client, evidence_body):
    first = client.post(f"{API}/evidence-packs", json=evidence_body).json()["data"]
    # Same instant written with an offset
    same_scope = {**evidence_body, "periodStart": "2026-02-15T01:00:00+01:00"}
    second = client.post(f"{API}/evidence-packs", json=same_scope).json()["data"]
    other_site = client.post(f"{API}/evidence-packs", json={**evidence_body, "siteId": "site-leeds"}).json()["data"]

    assert first["id"] != second["id"]
    assert first["manifestJson"]["checksums"] == second["manifestJson"]["checksums"]
    assert first["manifestJson"]["checksums"] != other_site["manifestJson"]["checksums"]


@pytest.mark.parametrize(
    "field,value",
    [("requestedBy", "x"), ("periodStart", "last week"), ("periodEnd", "2026-02-22T23:59:59")],
)
def test_evidence_pack_rejects_invalid_body(client, evidence_body, field, value):
    response = client.post(f"{API}/evidence-packs", json={**evidence_body, field: value})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"


def test_evidence_pack_rejects_inverted_period(client, evidence_body):
    body = {**evidence_body, "periodStart": evidence_body["periodEnd"], "periodEnd": evidence_body["periodStart"]}

    response = client.post(f"{API}/evidence-packs", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "periodEnd must not be before periodStart"
