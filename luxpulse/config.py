"""Configuration for the application."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Configuration for the SQLite store."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    path: str = Field(default="./luxpulse.db", description="SQLite database file path")

    @property
    def url(self) -> str:
        """Get synchronous database URL."""
        return f"sqlite:///{Path(self.path).as_posix()}"

    @property
    def async_url(self) -> str:
        """Get asynchronous database URL."""
        return f"sqlite+aiosqlite:///{Path(self.path).as_posix()}"


class ApiConfig(BaseSettings):
    """Configuration for the HTTP API."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=4000, description="Bind port")
    title: str = Field(default="LuxPulse API", description="OpenAPI title")
    version: str = Field(default="1.0.0", description="API version")
    prefix: str = Field(default="/api/v1", description="Prefix for versioned routes")
    seed_demo_data: bool = Field(default=True, description="Seed demo estate on first start")
    evidence_artifact_prefix: str = Field(
        default="minio://evidence", description="Object-store location evidence pack artefacts are referenced under"
    )


class WorkerConfig(BaseSettings):
    """Configuration for the rule evaluation worker."""

    model_config = SettingsConfigDict(env_prefix="WORKER_", env_file=".env", extra="ignore")

    tick_interval_seconds: float = Field(default=60.0, gt=0, description="Seconds between ticks")
    fixture_name: str = Field(default="offline-event-ticket", description="Fixture replayed on each tick")
    deterministic_ids: bool = Field(
        default=False, description="Derive event/ticket ids from rule id and input ref instead of uuid4"
    )
    persist_results: bool = Field(default=False, description="Keep recent tick records in an in-memory sink")
    history_size: int = Field(default=500, gt=0, description="Records the in-memory sink retains")
    results_csv_path: str | None = Field(default=None, description="Append tick records to this CSV file")


class LoggingConfig(BaseSettings):
    """Configuration for logging."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Minimum console log level")
    file_path: str | None = Field(default=None, description="Rotating log file (disabled when unset)")
    serialize: bool = Field(default=False, description="Write the log file as JSON lines")


class LedgerConfig(BaseSettings):
    """Validation limits for control-action ledger writes."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_", env_file=".env", extra="ignore")

    min_justification_length: int = Field(default=5, ge=1, description="Minimum justification length")
    min_actor_id_length: int = Field(default=2, ge=1, description="Minimum actor id length")
    min_action_type_length: int = Field(default=2, ge=1, description="Minimum action type length")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
