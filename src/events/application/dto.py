"""
Keptn Event Payload DTOs
=========================

Pydantic models for the ``data`` attribute of the Keptn CloudEvents this
service consumes and produces.

Field names follow the Keptn wire format (camelCase and ``get-sli``), exposed
to Python under snake_case names through aliases.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventData(BaseModel):
    """Properties common to every Keptn task event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project: str = ""
    stage: str = ""
    service: str = ""
    labels: Optional[Dict[str, str]] = None
    status: Optional[str] = None
    result: Optional[str] = None
    message: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ========== get-sli ==========

class GetSLITriggeredParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sli_provider: str = Field(default="", alias="sliProvider")
    start: str = ""
    end: str = ""
    indicators: List[str] = Field(default_factory=list)


class GetSLITriggeredEventData(EventData):
    """Payload of sh.keptn.event.get-sli.triggered."""
    get_sli: GetSLITriggeredParams = Field(default_factory=GetSLITriggeredParams, alias="get-sli")


class SLIResultDTO(BaseModel):
    metric: str
    value: float
    success: bool = True


class GetSLIFinishedParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str
    indicator_values: List[SLIResultDTO] = Field(default_factory=list, alias="indicatorValues")


class GetSLIFinishedEventData(EventData):
    """Payload of sh.keptn.event.get-sli.finished."""
    get_sli: GetSLIFinishedParams = Field(..., alias="get-sli")


# ========== configure-monitoring ==========

class ConfigureMonitoringParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""


class ConfigureMonitoringTriggeredEventData(EventData):
    """Payload of sh.keptn.event.configure-monitoring.triggered."""
    configure_monitoring: ConfigureMonitoringParams = Field(
        default_factory=ConfigureMonitoringParams,
        alias="configureMonitoring"
    )
