"""
Events Domain Layer
===================

CloudEvent envelope and Keptn event type naming rules.

This layer has no dependencies on infrastructure.
"""

from events.domain.entities import (
    KeptnCloudEvent,
    KEPTN_EVENT_PREFIX,
    GET_SLI_TASK,
    CONFIGURE_MONITORING_TASK,
    LEGACY_CONFIGURE_MONITORING_EVENT_TYPE,
    get_triggered_event_type,
    get_started_event_type,
    get_finished_event_type,
    parse_task_name,
)

__all__ = [
    "KeptnCloudEvent",
    "KEPTN_EVENT_PREFIX",
    "GET_SLI_TASK",
    "CONFIGURE_MONITORING_TASK",
    "LEGACY_CONFIGURE_MONITORING_EVENT_TYPE",
    "get_triggered_event_type",
    "get_started_event_type",
    "get_finished_event_type",
    "parse_task_name",
]
