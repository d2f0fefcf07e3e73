from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest

from core import ConfigurationException, EventSendException, MetricsQueryException
from events.application import EventData, IEventSender
from events.domain import KeptnCloudEvent, get_triggered_event_type, GET_SLI_TASK
from sli.application import IMetricsQueryExecutor, ISLIConfigProvider


class RecordingEventSender(IEventSender):
    """Keeps every started/finished payload instead of sending it."""

    def __init__(self, fail_on: Optional[str] = None):
        self.started: List[EventData] = []
        self.finished: List[EventData] = []
        self._fail_on = fail_on

    async def send_task_started(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        if self._fail_on == "started":
            raise EventSendException("broker down")
        self.started.append(data)
        return KeptnCloudEvent(source="test", type="sh.keptn.event.get-sli.started")

    async def send_task_finished(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        if self._fail_on == "finished":
            raise EventSendException("broker down")
        self.finished.append(data)
        return KeptnCloudEvent(source="test", type="sh.keptn.event.get-sli.finished")


class StaticSLIConfigProvider(ISLIConfigProvider):
    def __init__(self, indicators: Optional[Dict[str, str]] = None, error: Optional[Exception] = None):
        self._indicators = indicators or {}
        self._error = error
        self.calls: List[tuple] = []

    async def get_sli_config(self, project: str, stage: str, service: str) -> Dict[str, str]:
        self.calls.append((project, stage, service))
        if self._error is not None:
            raise self._error
        return dict(self._indicators)


class ScriptedMetricsExecutor(IMetricsQueryExecutor):
    """Answers queries from a {query: value} table; unknown queries fail."""

    def __init__(self, values: Optional[Dict[str, float]] = None):
        self._values = values or {}
        self.calls: List[Dict[str, Any]] = []

    async def run_query(self, query, row_id, quantization_millis, rollup, start, end) -> float:
        self.calls.append({
            "query": query,
            "row_id": row_id,
            "quantization_millis": quantization_millis,
            "rollup": rollup,
            "start": start,
            "end": end,
        })
        if query not in self._values:
            raise MetricsQueryException("no data")
        return self._values[query]


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def event_sender() -> RecordingEventSender:
    return RecordingEventSender()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def config_provider_factory() -> Callable[..., StaticSLIConfigProvider]:
    return StaticSLIConfigProvider


@pytest.fixture
def metrics_executor_factory() -> Callable[..., ScriptedMetricsExecutor]:
    return ScriptedMetricsExecutor


@pytest.fixture
def failing_event_sender_factory() -> Callable[[str], RecordingEventSender]:
    return lambda phase: RecordingEventSender(fail_on=phase)


@pytest.fixture
def config_error() -> ConfigurationException:
    return ConfigurationException("sumologic-service/sli.yaml is not valid YAML")


@pytest.fixture
def get_sli_data() -> Callable[..., Dict[str, Any]]:
    """Factory for the data of a get-sli.triggered event."""

    def factory(
        indicators=("throughput",),
        start="2021-01-01T00:00:00Z",
        end="2021-01-01T00:05:00Z",
        provider="sumologic",
        labels: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "project": "sockshop",
            "stage": "staging",
            "service": "carts",
            "get-sli": {
                "sliProvider": provider,
                "start": start,
                "end": end,
                "indicators": list(indicators),
            },
        }
        if labels is not None:
            data["labels"] = labels
        return data

    return factory


@pytest.fixture
def triggered_event() -> Callable[..., KeptnCloudEvent]:
    def factory(data: Dict[str, Any], event_type: Optional[str] = None) -> KeptnCloudEvent:
        return KeptnCloudEvent(
            id="triggered-1",
            source="lighthouse-service",
            type=event_type or get_triggered_event_type(GET_SLI_TASK),
            shkeptncontext="ctx-123",
            data=data,
        )

    return factory
