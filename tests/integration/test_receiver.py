import json

import pytest
from fastapi.testclient import TestClient

from config import Settings
from core import MalformedQueryException
from events.application import EventDispatcher, GetSLITriggeredEventData
from main import create_app


class RecordingHandler:
    def __init__(self, error=None):
        self.calls = []
        self._error = error

    async def __call__(self, event, data):
        self.calls.append((event, data))
        if self._error is not None:
            raise self._error


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, env="local", local_resource_dir=tmp_path, log_level="WARNING")


@pytest.fixture
def client_factory(settings):
    def factory(handler, **overrides):
        dispatcher = EventDispatcher()
        dispatcher.register("sh.keptn.event.get-sli.triggered", GetSLITriggeredEventData, handler)
        app = create_app(settings.model_copy(update=overrides), dispatcher=dispatcher)
        return TestClient(app)

    return factory


def _structured_event(data, event_type="sh.keptn.event.get-sli.triggered"):
    return {
        "specversion": "1.0",
        "id": "triggered-1",
        "source": "lighthouse-service",
        "type": event_type,
        "datacontenttype": "application/json",
        "shkeptncontext": "ctx-123",
        "data": data,
    }


def test_health_endpoints(client_factory):
    with client_factory(RecordingHandler()) as client:
        for path in ("/health", "/ready"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"status": "OK"}


def test_unknown_path_is_not_found(client_factory):
    with client_factory(RecordingHandler()) as client:
        response = client.get("/metrics")

    assert response.status_code == 404
    assert response.json() == {"status": "NOT FOUND"}


def test_structured_event_is_dispatched(client_factory, get_sli_data):
    handler = RecordingHandler()

    with client_factory(handler) as client:
        response = client.post("/", json=_structured_event(get_sli_data()))

    assert response.status_code == 200
    assert response.json() == {"status": "OK"}
    (event, data), = handler.calls
    assert event.id == "triggered-1"
    assert event.shkeptncontext == "ctx-123"
    assert data.service == "carts"
    assert data.get_sli.indicators == ["throughput"]


def test_binary_event_is_dispatched(client_factory, get_sli_data):
    handler = RecordingHandler()
    headers = {
        "ce-specversion": "1.0",
        "ce-id": "triggered-2",
        "ce-source": "lighthouse-service",
        "ce-type": "sh.keptn.event.get-sli.triggered",
        "ce-shkeptncontext": "ctx-456",
        "content-type": "application/json",
    }

    with client_factory(handler) as client:
        response = client.post("/", content=json.dumps(get_sli_data()), headers=headers)

    assert response.status_code == 200
    (event, data), = handler.calls
    assert event.id == "triggered-2"
    assert event.shkeptncontext == "ctx-456"
    assert data.get_sli.sli_provider == "sumologic"


def test_custom_receive_path(client_factory, get_sli_data):
    handler = RecordingHandler()

    with client_factory(handler, rcv_path="/events") as client:
        response = client.post("/events", json=_structured_event(get_sli_data()))

    assert response.status_code == 200
    assert len(handler.calls) == 1


def test_unhandled_event_type_is_rejected(client_factory):
    handler = RecordingHandler()

    with client_factory(handler) as client:
        response = client.post("/", json=_structured_event({}, event_type="sh.keptn.event.evaluation.triggered"))

    assert response.status_code == 400
    body = response.json()
    assert body["error_type"] == "UnhandledEventException"
    assert body["keptn_context"] == "ctx-123"
    assert handler.calls == []


@pytest.mark.parametrize(
    "content",
    [b"not json", b"[1, 2, 3]", b'{"specversion": "1.0", "id": "x"}'],
)
def test_undecodable_event_is_rejected(client_factory, content):
    with client_factory(RecordingHandler()) as client:
        response = client.post("/", content=content, headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error_type"] == "ValidationException"


def test_invalid_payload_is_rejected(client_factory):
    with client_factory(RecordingHandler()) as client:
        response = client.post("/", json=_structured_event({"get-sli": {"indicators": "throughput"}}))

    assert response.status_code == 400
    assert response.json()["error_type"] == "ValidationException"


def test_handler_failure_is_server_error(client_factory, get_sli_data):
    handler = RecordingHandler(error=MalformedQueryException("expected exactly one quantize clause", "metric=x"))

    with client_factory(handler) as client:
        response = client.post("/", json=_structured_event(get_sli_data()))

    assert response.status_code == 500
    body = response.json()
    assert body["error_type"] == "MalformedQueryException"
    assert body["detail"] == "expected exactly one quantize clause"
    assert body["keptn_context"] == "ctx-123"
