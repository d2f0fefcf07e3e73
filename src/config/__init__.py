"""
Configuration Module
====================

Service settings and constants, loaded from environment variables using Pydantic.

Settings are read once at process start and handed to the services that need
them; nothing mutates them afterwards.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ========== Constants ==========

SERVICE_NAME = "sumologic-service"
"""Name used as CloudEvent source and in structured logs."""

SLI_PROVIDER = "sumologic"
"""Identity this service answers to in get-sli.triggered events."""

SLI_RESOURCE_URI = "sumologic-service/sli.yaml"

MIN_SLEEP_BEFORE_API_IN_SECONDS = 30

# Second, unconditional wait before each metrics query.
SETTLE_DELAY_SECONDS = 30

DEFAULT_SUMO_END_PT = "https://api.sumologic.com/api"


class Settings(BaseSettings):
    """
    Service settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default=SERVICE_NAME, description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")

    # ========== CloudEvents receiver ==========
    rcv_port: int = Field(default=8080, description="Port on which to listen for cloudevents", ge=1, le=65535)
    rcv_path: str = Field(default="/", description="Path to which cloudevents are sent")
    env: str = Field(
        default="local",
        description="'local' reads resources from the local filesystem instead of the configuration service"
    )

    # ========== Keptn ==========
    configuration_service: str = Field(
        default="",
        description="URL of the Keptn configuration service (resources of the config repo)"
    )
    event_broker_url: str = Field(
        default="http://localhost:8081/event",
        description="Where started/finished CloudEvents are sent"
    )
    local_resource_dir: Path = Field(
        default=Path("."),
        description="Base directory for resources when running with env=local"
    )

    # ========== Sumo Logic ==========
    region_code: str = Field(default="us1", description="Region code of the Sumo Logic instance")
    access_id: str = Field(default="", description="Sumo Logic access id (used with access_key)")
    access_key: str = Field(default="", description="Sumo Logic access key (used with access_id)")
    sumo_end_pt: str = Field(
        default=DEFAULT_SUMO_END_PT,
        description="URL of the Sumo Logic API, overridden by a non-default region_code"
    )
    sumo_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for Sumo Logic API calls",
        gt=0
    )
    sleep_before_api_in_seconds: int = Field(
        default=MIN_SLEEP_BEFORE_API_IN_SECONDS,
        description="Wait before each metrics query so ingested data shows up in the API"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("sleep_before_api_in_seconds", mode="before")
    @classmethod
    def clamp_sleep_before_api(cls, v: Any) -> int:
        """Anything unparsable or below the minimum becomes the minimum."""
        try:
            seconds = int(str(v).strip())
        except (TypeError, ValueError):
            return MIN_SLEEP_BEFORE_API_IN_SECONDS
        return max(seconds, MIN_SLEEP_BEFORE_API_IN_SECONDS)

    @field_validator("region_code")
    @classmethod
    def normalize_region_code(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def sumo_api_url(self) -> str:
        """Sumo Logic API base URL for the configured region."""
        if self.region_code and self.region_code != "us1":
            return f"https://api.{self.region_code}.sumologic.com/api"
        return self.sumo_end_pt

    @property
    def use_local_filesystem(self) -> bool:
        return self.env == "local"


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# ========== Task status values (Keptn wire format) ==========

class TaskStatus(str, Enum):
    """Status of a finished task."""
    SUCCEEDED = "succeeded"
    ERRORED = "errored"


class TaskResult(str, Enum):
    """Verdict of a finished task."""
    PASS = "pass"
    FAIL = "fail"
