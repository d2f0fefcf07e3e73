"""
sumologic-service - Main Application
=====================================

Keptn SLI provider for Sumo Logic.

Listens for Keptn CloudEvents on RCV_PORT/RCV_PATH and answers
get-sli.triggered events for the "sumologic" provider with values queried
from the Sumo Logic metrics API.

Clean Architecture Layers:
- Interfaces: FastAPI controllers (CloudEvent receiver, health)
- Application: Event routing, get-sli task lifecycle
- Domain: Query templating, quantize parsing, task entities
- Infrastructure: Keptn event broker, configuration service, Sumo Logic
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from config import Settings, get_settings
from core import ApplicationException
from events.application import (
    EventDispatcher,
    ConfigureMonitoringTriggeredEventData,
    GetSLITriggeredEventData,
    handle_configure_monitoring_triggered,
)
from events.domain import CONFIGURE_MONITORING_TASK, GET_SLI_TASK, get_triggered_event_type
from events.infrastructure import (
    KeptnEventSender,
    ConfigurationServiceResourceStore,
    LocalFileSystemResourceStore,
)
from events.interfaces import create_event_router, health_router
from sli.application import GetSLIService
from sli.infrastructure import SumoLogicMetricsClient, YAMLSLIConfigProvider
from shared.api.middleware import (
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_dispatcher(get_sli_service: GetSLIService) -> EventDispatcher:
    """Routing table from event type to handler."""
    dispatcher = EventDispatcher()
    dispatcher.register(
        get_triggered_event_type(GET_SLI_TASK),
        GetSLITriggeredEventData,
        get_sli_service.handle_triggered_event
    )
    dispatcher.register(
        get_triggered_event_type(CONFIGURE_MONITORING_TASK),
        ConfigureMonitoringTriggeredEventData,
        handle_configure_monitoring_triggered
    )
    return dispatcher


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Create Keptn and Sumo Logic clients
    3. Build the event routing table

    SHUTDOWN:
    1. Close HTTP clients
    """
    settings: Settings = app.state.settings

    # === STARTUP ===
    setup_logging(settings.log_level, settings.app_name)
    logger.info("Starting sumologic-service", extra={
        "version": settings.app_version,
        "port": settings.rcv_port,
        "rcv_path": settings.rcv_path,
        "sleep_before_api_in_seconds": settings.sleep_before_api_in_seconds,
    })

    clients = []
    if app.state.dispatcher is None:
        event_sender = KeptnEventSender(settings.event_broker_url, source=settings.app_name)
        clients.append(event_sender)

        if settings.use_local_filesystem:
            logger.info("env=local: Running with local filesystem to fetch resources")
            resource_store = LocalFileSystemResourceStore(settings.local_resource_dir)
        else:
            resource_store = ConfigurationServiceResourceStore(settings.configuration_service)
            clients.append(resource_store)

        metrics_client = SumoLogicMetricsClient.from_settings(settings)
        clients.append(metrics_client)

        get_sli_service = GetSLIService(
            event_sender=event_sender,
            config_provider=YAMLSLIConfigProvider(resource_store),
            metrics_executor=metrics_client,
            sleep_before_api_seconds=settings.sleep_before_api_in_seconds,
        )
        app.state.dispatcher = build_dispatcher(get_sli_service)

    logger.info("sumologic-service started", extra={"event_types": app.state.dispatcher.event_types})

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down sumologic-service")
    for client in clients:
        await client.close()
    logger.info("Shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    dispatcher: Optional[EventDispatcher] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Service settings, read from the environment if omitted
        dispatcher: Pre-built routing table; built from settings at startup if omitted
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="sumologic-service",
        description="Keptn SLI provider for Sumo Logic",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # The catch-all GET in health_router must come last
    app.include_router(create_event_router(settings.rcv_path))
    app.include_router(health_router)

    return app


app = create_app()


def main() -> None:
    """Serve the application with uvicorn until SIGINT/SIGTERM."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.rcv_port,
        log_config=None
    )


if __name__ == "__main__":
    main()
