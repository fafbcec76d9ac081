"""Pydantic schemas for API requests and responses.

Wire names are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from luxpulse.api.domain.models import (
    ActorType,
    AssetStatus,
    EventSeverity,
    EventStatus,
    EvidencePackStatus,
    TargetType,
    TenantStatus,
    TicketPriority,
    TicketStatus,
)
from luxpulse.config import AppConfig

# Load configuration
_app_config = AppConfig()

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DataResponse(CamelModel, Generic[T]):
    """Envelope used by every endpoint: ``{"data": ...}``."""

    data: T


# Tenant / site / zone schemas
class TenantCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)


class TenantResponse(CamelModel):
    id: str
    name: str
    status: TenantStatus
    created_at: datetime


class SiteCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    timezone: str = Field(..., min_length=2, max_length=64)
    latitude: float | None = None
    longitude: float | None = None


class SiteResponse(CamelModel):
    id: str
    tenant_id: str
    name: str
    timezone: str
    latitude: float | None
    longitude: float | None
    created_at: datetime


class ZoneCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    type: str = Field(..., min_length=2, max_length=64)


class ZoneResponse(CamelModel):
    id: str
    tenant_id: str
    site_id: str
    name: str
    type: str
    created_at: datetime


# Asset schemas
class AssetCreate(CamelModel):
    """Schema for registering an asset."""

    site_id: str
    zone_id: str
    asset_tag: str = Field(..., min_length=2, max_length=64, description="Estate-unique tag, e.g. LUX-0003")
    serial_number: str = Field(..., min_length=2)
    manufacturer: str = Field(..., min_length=2)
    model: str = Field(..., min_length=2)
    protocol_type: str = Field(..., min_length=2, description="Field protocol, e.g. dali2 or bacnet")
    external_ref: str | None = None


class AssetUpdate(CamelModel):
    status: AssetStatus | None = None
    last_seen_at: AwareDatetime | None = None


class AssetResponse(CamelModel):
    id: str
    tenant_id: str
    site_id: str
    zone_id: str
    asset_tag: str
    serial_number: str
    manufacturer: str
    model: str
    protocol_type: str
    external_ref: str | None
    status: AssetStatus
    last_seen_at: datetime | None
    created_at: datetime


# Event / ticket schemas
class EventResponse(CamelModel):
    id: str
    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    type: str
    severity: EventSeverity
    status: EventStatus
    detected_at: datetime
    acknowledged_at: datetime | None
    rule_id: str | None
    rule_version: int | None
    correlation_id: str
    raw_payload_ref: str | None


class TicketCreate(CamelModel):
    """Schema for opening a ticket by hand."""

    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    source_event_id: str | None = None
    priority: TicketPriority
    assigned_to: str | None = None
    sla_due_at: AwareDatetime | None = None


class TicketUpdate(CamelModel):
    """All fields optional - only provided fields are changed."""

    status: TicketStatus | None = None
    assigned_to: str | None = None
    resolution_summary: str | None = None
    closed_at: AwareDatetime | None = None


class TicketResponse(CamelModel):
    id: str
    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    source_event_id: str | None
    status: TicketStatus
    priority: TicketPriority
    opened_at: datetime
    assigned_to: str | None
    sla_due_at: datetime | None
    closed_at: datetime | None
    resolution_summary: str | None


# Control-action ledger schemas
class ControlActionCreate(CamelModel):
    """
    Schema for appending a control action to the ledger.

    ``action_type`` is required everywhere; the typed endpoints (schedules,
    overrides) then replace it with their own.
    """

    tenant_id: str
    actor_type: ActorType
    actor_id: str = Field(..., min_length=_app_config.ledger.min_actor_id_length)
    target_type: TargetType
    target_id: str
    action_type: str = Field(..., min_length=_app_config.ledger.min_action_type_length)
    justification: str = Field(..., min_length=_app_config.ledger.min_justification_length)
    before_state_json: dict[str, Any]
    after_state_json: dict[str, Any]
    approval_json: dict[str, Any] | None = None
    correlation_id: str | None = Field(None, min_length=1, description="Resolved server-side when absent")


class ControlActionResponse(CamelModel):
    id: str
    tenant_id: str
    actor_type: ActorType
    actor_id: str
    target_type: TargetType
    target_id: str
    action_type: str
    justification: str
    before_state_json: dict[str, Any]
    after_state_json: dict[str, Any]
    approval_json: dict[str, Any] | None
    correlation_id: str
    adapter_response_ref: str | None
    created_at: datetime


class ControlActionEnvelope(CamelModel):
    """Ledger write response: stored record plus the resolved correlation id."""

    data: ControlActionResponse
    correlation_id: str


class ConfigSnapshotResponse(CamelModel):
    tenant_id: str
    site_id: str
    as_of: str
    schedules: list[ControlActionResponse]
    overrides: list[ControlActionResponse]


# Telemetry ingest schemas
class TelemetryPointIn(CamelModel):
    ts: AwareDatetime
    metric_key: str
    metric_value: float
    unit: str
    quality: str = "good"


class TelemetryIngest(CamelModel):
    """Batch of points pushed by one adapter for one asset."""

    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    adapter_id: str
    raw_payload_ref: str | None = None
    points: list[TelemetryPointIn]


class TelemetryIngestResponse(CamelModel):
    ingested: int
    correlation_id: str


# Evidence pack schemas
class EvidencePackCreate(CamelModel):
    tenant_id: str
    site_id: str
    requested_by: str = Field(..., min_length=2)
    period_start: AwareDatetime
    period_end: AwareDatetime


class EvidencePackResponse(CamelModel):
    id: str
    tenant_id: str
    site_id: str
    requested_by: str
    period_start: datetime
    period_end: datetime
    status: EvidencePackStatus
    manifest_json: dict[str, Any]
    artifact_ref: str
    created_at: datetime
    completed_at: datetime | None


class EvidenceDownloadResponse(CamelModel):
    artifact_ref: str
    manifest: dict[str, Any]


# Rule schemas
class RuleCatalogueEntry(CamelModel):
    id: str
    version: int
    enabled: bool
    description: str
    condition: dict[str, Any]
    action: dict[str, Any]


class TelemetryReadingIn(CamelModel):
    heartbeat_age_minutes: float = Field(..., ge=0)
    power_watts: float
    expected_power_watts: float = Field(..., gt=0)
    fault_count_24h: int = Field(..., ge=0, alias="faultCount24h")


class ReplayRequest(CamelModel):
    """Snapshot posted for an ad-hoc replay."""

    fixture: str = Field("adhoc", min_length=1)
    tenant_id: str
    site_id: str
    zone_id: str
    asset_id: str
    now: AwareDatetime | None = Field(None, description="Evaluation time; server time when absent")
    telemetry: TelemetryReadingIn
    materialize: bool = Field(False, description="Store matched events and tickets")


class ExecutionRecordResponse(CamelModel):
    rule_id: str
    rule_version: int
    executed_at: str
    input_ref: str
    output_event_id: str | None
    output_ticket_id: str | None
    outcome: str
    error: str | None = None


class ReplayResponse(CamelModel):
    fixture: str
    input: dict[str, Any]
    result: list[ExecutionRecordResponse]
