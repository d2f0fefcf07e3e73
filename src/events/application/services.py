"""
Events Application Services
============================

Routing of incoming Keptn CloudEvents to their task handlers, and the
interfaces through which handlers talk back to Keptn.

Following SOLID principles:
- Dependency Inversion: handlers depend on IEventSender / IResourceStore,
  not on HTTP clients
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from core import UnhandledEventException, ValidationException
from events.domain import (
    KeptnCloudEvent,
    CONFIGURE_MONITORING_TASK,
    LEGACY_CONFIGURE_MONITORING_EVENT_TYPE,
    get_triggered_event_type,
)
from events.application.dto import EventData, ConfigureMonitoringTriggeredEventData
from shared.infrastructure.logging import get_logger, get_context_logger

logger = get_logger(__name__)

EventHandler = Callable[[KeptnCloudEvent, Any], Awaitable[None]]


# ========== Keptn Interfaces (Dependency Inversion) ==========

class IEventSender(ABC):
    """Interface for emitting task events back onto the Keptn bus."""

    @abstractmethod
    async def send_task_started(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        """Send <task>.started in reply to a triggered event."""

    @abstractmethod
    async def send_task_finished(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        """Send <task>.finished in reply to a triggered event."""


class IResourceStore(ABC):
    """Interface for reading resources of the Keptn config repo."""

    @abstractmethod
    async def get_service_resource(
        self,
        project: str,
        stage: str,
        service: str,
        resource_uri: str
    ) -> str:
        """Return the content of a service-level resource."""


# ========== Routing ==========

@dataclass(frozen=True)
class EventRoute:
    """Payload model and handler for one event type."""
    payload_model: Type[BaseModel]
    handler: EventHandler


class EventDispatcher:
    """
    Routes CloudEvents to handlers by event type.

    The payload is decoded once into the route's typed model before the
    handler is called.
    """

    def __init__(self, routes: Optional[Dict[str, EventRoute]] = None):
        self._routes: Dict[str, EventRoute] = dict(routes or {})

    def register(
        self,
        event_type: str,
        payload_model: Type[BaseModel],
        handler: EventHandler
    ) -> None:
        """Register (or replace) the handler for an event type."""
        self._routes[event_type] = EventRoute(payload_model, handler)

    @property
    def event_types(self) -> list[str]:
        return sorted(self._routes)

    async def dispatch(self, event: KeptnCloudEvent) -> None:
        """
        Decode and handle one event.

        Raises:
            UnhandledEventException: No route for the event type
            ValidationException: Payload does not match the route's model
        """
        event = self._normalize(event)
        log = get_context_logger(__name__, event.shkeptncontext, event.id)
        log.info("gotEvent", extra={"event_type": event.type})

        route = self._routes.get(event.type)
        if route is None:
            log.error("Unhandled Keptn Cloud Event", extra={"event_type": event.type})
            raise UnhandledEventException(event.type)

        try:
            payload = route.payload_model.model_validate(event.data or {})
        except ValidationError as e:
            raise ValidationException(
                f"Could not decode payload of {event.type}",
                {"event_type": event.type, "errors": e.errors(include_url=False)}
            )

        await route.handler(event, payload)

    @staticmethod
    def _normalize(event: KeptnCloudEvent) -> KeptnCloudEvent:
        # The CLI sends monitoring.configure but waits for configure-monitoring events
        if event.type == LEGACY_CONFIGURE_MONITORING_EVENT_TYPE:
            return event.model_copy(
                update={"type": get_triggered_event_type(CONFIGURE_MONITORING_TASK)}
            )
        return event


# ========== Handlers ==========

async def handle_configure_monitoring_triggered(
    event: KeptnCloudEvent,
    data: ConfigureMonitoringTriggeredEventData
) -> None:
    """Log configure-monitoring.triggered; there is nothing to configure for Sumo Logic."""
    log = get_context_logger(__name__, event.shkeptncontext, event.id)
    log.info(
        "Handling configure-monitoring.triggered Event",
        extra={
            "project": data.project,
            "stage": data.stage,
            "keptn_service": data.service,
            "monitoring_type": data.configure_monitoring.type,
        }
    )
