"""
Keptn Event Entities
=====================

CloudEvent envelope and Keptn event type naming.

Keptn task events follow the pattern ``sh.keptn.event.<task>.<phase>`` where
phase is one of triggered, started, status.changed or finished.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


KEPTN_EVENT_PREFIX = "sh.keptn.event."
KEPTN_SPEC_VERSION = "0.2.3"
CLOUDEVENTS_SPEC_VERSION = "1.0"

GET_SLI_TASK = "get-sli"
CONFIGURE_MONITORING_TASK = "configure-monitoring"

# Sent by older Keptn CLIs, which still wait for configure-monitoring events.
LEGACY_CONFIGURE_MONITORING_EVENT_TYPE = "sh.keptn.event.monitoring.configure"

_PHASES = ("triggered", "started", "status.changed", "finished")


def get_triggered_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}{task}.triggered"


def get_started_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}{task}.started"


def get_finished_event_type(task: str) -> str:
    return f"{KEPTN_EVENT_PREFIX}{task}.finished"


def parse_task_name(event_type: str) -> Optional[str]:
    """
    Extract the task name from a Keptn event type.

    Example:
        "sh.keptn.event.get-sli.triggered" -> "get-sli"

    Returns:
        The task name, or None if the type is not a Keptn task event
    """
    if not event_type.startswith(KEPTN_EVENT_PREFIX):
        return None
    rest = event_type[len(KEPTN_EVENT_PREFIX):]
    for phase in _PHASES:
        suffix = f".{phase}"
        if rest.endswith(suffix) and len(rest) > len(suffix):
            return rest[: -len(suffix)]
    return None


class KeptnCloudEvent(BaseModel):
    """
    CloudEvent (spec 1.0) with the Keptn extension attributes.

    Unknown extension attributes are kept so they survive a round trip.
    """

    model_config = ConfigDict(extra="allow")

    specversion: str = CLOUDEVENTS_SPEC_VERSION
    id: str = Field(default_factory=lambda: str(uuid4()))
    source: str
    type: str
    time: Optional[datetime] = None
    datacontenttype: str = "application/json"
    shkeptncontext: str = ""
    triggeredid: Optional[str] = None
    shkeptnspecversion: Optional[str] = None
    data: Any = None

    @property
    def task_name(self) -> Optional[str]:
        return parse_task_name(self.type)

    def to_wire(self) -> dict:
        """Structured-mode JSON representation."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def reply_to(
        cls,
        triggered: "KeptnCloudEvent",
        event_type: str,
        source: str,
        data: Any
    ) -> "KeptnCloudEvent":
        """Create an event answering ``triggered`` within the same Keptn context."""
        return cls(
            source=source,
            type=event_type,
            time=datetime.now(timezone.utc),
            shkeptncontext=triggered.shkeptncontext,
            triggeredid=triggered.id,
            shkeptnspecversion=KEPTN_SPEC_VERSION,
            data=data,
        )
