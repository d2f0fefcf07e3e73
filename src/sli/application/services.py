"""
SLI Application Services
=========================

The get-sli task lifecycle: triggered -> started -> finished.

Following SOLID principles:
- Single Responsibility: GetSLIService only sequences the task; query
  handling lives in the domain, I/O behind the interfaces below
- Dependency Inversion: Depend on abstractions, not on HTTP clients
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable, Dict

from config import SLI_PROVIDER, SETTLE_DELAY_SECONDS, MIN_SLEEP_BEFORE_API_IN_SECONDS
from core import (
    ConfigurationException,
    ConfigurationServiceException,
    MetricsQueryException,
    ResourceNotFoundException,
)
from events.application import (
    EventData,
    GetSLIFinishedEventData,
    GetSLIFinishedParams,
    GetSLITriggeredEventData,
    IEventSender,
    SLIResultDTO,
)
from events.domain import KeptnCloudEvent
from sli.domain import (
    QuantizeClauseParser,
    QueryTemplateEngine,
    ResolvedWindow,
    TaskOutcome,
    TaskRequest,
)
from shared.infrastructure.logging import get_context_logger

METRICS_ROW_ID = "A"


# ========== Interfaces (Dependency Inversion) ==========

class IMetricsQueryExecutor(ABC):
    """Interface for the metrics backend."""

    @abstractmethod
    async def run_query(
        self,
        query: str,
        row_id: str,
        quantization_millis: int,
        rollup: str,
        start: datetime,
        end: datetime
    ) -> float:
        """
        Run one query over [start, end] and return its first data point.

        Raises:
            MetricsQueryException: For any failure, whatever the cause
        """


class ISLIConfigProvider(ABC):
    """Interface for SLI query configuration access."""

    @abstractmethod
    async def get_sli_config(self, project: str, stage: str, service: str) -> Dict[str, str]:
        """Get query templates by indicator name for a service."""


# ========== Application Services ==========

class GetSLIService:
    """
    Handles sh.keptn.event.get-sli.triggered for the Sumo Logic provider.

    Indicators are queried one after the other, each after a consistency
    delay, because Sumo Logic serves stale values right after ingestion.
    A failing query marks the task errored but the remaining indicators are
    still queried and reported.
    """

    def __init__(
        self,
        event_sender: IEventSender,
        config_provider: ISLIConfigProvider,
        metrics_executor: IMetricsQueryExecutor,
        sleep_before_api_seconds: int = MIN_SLEEP_BEFORE_API_IN_SECONDS,
        settle_delay_seconds: int = SETTLE_DELAY_SECONDS,
        provider: str = SLI_PROVIDER,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._event_sender = event_sender
        self._config_provider = config_provider
        self._metrics_executor = metrics_executor
        self._sleep_before_api_seconds = sleep_before_api_seconds
        self._settle_delay_seconds = settle_delay_seconds
        self._provider = provider
        self._sleep = sleep

    async def handle_triggered_event(
        self,
        event: KeptnCloudEvent,
        data: GetSLITriggeredEventData
    ) -> None:
        """Entry point registered with the event dispatcher."""
        request = TaskRequest(
            project=data.project,
            stage=data.stage,
            service=data.service,
            sli_provider=data.get_sli.sli_provider,
            start=data.get_sli.start,
            end=data.get_sli.end,
            indicators=tuple(data.get_sli.indicators),
            labels=dict(data.labels or {}),
        )
        await self.run(event, request)

    async def run(self, event: KeptnCloudEvent, request: TaskRequest) -> None:
        """
        Run the task lifecycle for one request.

        Raises:
            EventSendException: started or finished event could not be sent
            InvalidTimestampException: start/end cannot be parsed (no finished event)
            MalformedQueryException: a query has no valid quantize clause (no finished event)
        """
        log = get_context_logger(__name__, event.shkeptncontext, event.id)
        log.info("Handling get-sli.triggered Event")

        if request.sli_provider != self._provider:
            log.info(
                "Not handling get-sli event as it is meant for another provider",
                extra={"sli_provider": request.sli_provider}
            )
            return

        await self._event_sender.send_task_started(event, self._event_data(request))

        window = ResolvedWindow.resolve(request.start, request.end)

        try:
            sli_config = await self._config_provider.get_sli_config(
                request.project, request.stage, request.service
            )
        except (ResourceNotFoundException, ConfigurationException, ConfigurationServiceException) as e:
            log.error("Failed to fetch SLI configuration", extra={"error": e.message})
            outcome = TaskOutcome.errored(
                request.start, request.end, request.labels,
                f"Failed to fetch SLI configuration: {e.message}"
            )
            await self._event_sender.send_task_finished(event, self._finished_event_data(request, outcome))
            return

        log.debug("SLI config", extra={"indicators": sorted(sli_config)})

        outcome = TaskOutcome(start=request.start, end=request.end, labels=request.labels)
        for indicator in request.indicators:
            query = QueryTemplateEngine.render(sli_config.get(indicator, ""), request, window)
            formatted_query, quantize = QuantizeClauseParser.parse(query)

            log.debug(
                "Waiting so that the metrics data is reflected correctly in the API",
                extra={"seconds": self._sleep_before_api_seconds + self._settle_delay_seconds}
            )
            await self._sleep(self._sleep_before_api_seconds)
            await self._sleep(self._settle_delay_seconds)

            log.debug(
                "Query sent to Sumo Logic",
                extra={
                    "indicator": indicator,
                    "query": formatted_query,
                    "from": window.start_millis,
                    "to": window.end_millis,
                }
            )
            try:
                value = await self._metrics_executor.run_query(
                    formatted_query,
                    METRICS_ROW_ID,
                    quantize.interval_millis,
                    quantize.rollup,
                    window.start,
                    window.end
                )
            except MetricsQueryException as e:
                log.error("Metrics query failed", extra={"indicator": indicator, "error": e.message})
                outcome.record_failure(indicator)
                continue

            outcome.record_value(indicator, value)

        await self._event_sender.send_task_finished(event, self._finished_event_data(request, outcome))
        log.info(
            "get-sli finished",
            extra={
                "status": outcome.status.value,
                "result": outcome.result.value,
                "values": len(outcome.indicator_values),
            }
        )

    @staticmethod
    def _event_data(request: TaskRequest) -> EventData:
        return EventData(
            project=request.project,
            stage=request.stage,
            service=request.service,
            labels=request.labels,
        )

    @staticmethod
    def _finished_event_data(request: TaskRequest, outcome: TaskOutcome) -> GetSLIFinishedEventData:
        return GetSLIFinishedEventData(
            project=request.project,
            stage=request.stage,
            service=request.service,
            labels=outcome.labels,
            status=outcome.status.value,
            result=outcome.result.value,
            message=outcome.message or None,
            get_sli=GetSLIFinishedParams(
                start=outcome.start,
                end=outcome.end,
                indicator_values=[
                    SLIResultDTO(metric=r.metric, value=r.value)
                    for r in outcome.indicator_values
                ],
            ),
        )
