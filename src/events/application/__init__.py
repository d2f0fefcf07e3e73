"""
Events Application Layer
=========================

Contains:
- DTOs: Keptn event payloads (get-sli, configure-monitoring)
- Services: Event routing table and stub handlers
- Interfaces: IEventSender, IResourceStore
"""

from events.application.dto import (
    EventData,
    GetSLITriggeredParams,
    GetSLITriggeredEventData,
    SLIResultDTO,
    GetSLIFinishedParams,
    GetSLIFinishedEventData,
    ConfigureMonitoringParams,
    ConfigureMonitoringTriggeredEventData,
)
from events.application.services import (
    EventDispatcher,
    EventRoute,
    EventHandler,
    IEventSender,
    IResourceStore,
    handle_configure_monitoring_triggered,
)

__all__ = [
    # DTOs
    "EventData",
    "GetSLITriggeredParams",
    "GetSLITriggeredEventData",
    "SLIResultDTO",
    "GetSLIFinishedParams",
    "GetSLIFinishedEventData",
    "ConfigureMonitoringParams",
    "ConfigureMonitoringTriggeredEventData",
    # Services
    "EventDispatcher",
    "EventRoute",
    "EventHandler",
    "handle_configure_monitoring_triggered",
    # Interfaces
    "IEventSender",
    "IResourceStore",
]
