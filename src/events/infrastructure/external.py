"""
Keptn External Service Integrations
====================================

Clients for the Keptn control plane:
- Event broker: receives the started/finished CloudEvents we emit
- Configuration service: serves resources of the config repo (sli.yaml)
- Local filesystem: stands in for the configuration service when env=local
"""

import base64
import binascii
import json
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from config import SERVICE_NAME
from core import (
    ConfigurationException,
    ConfigurationServiceException,
    EventSendException,
    ResourceNotFoundException,
)
from events.application import EventData, IEventSender, IResourceStore
from events.domain import KeptnCloudEvent, get_finished_event_type, get_started_event_type
from shared.infrastructure.logging import get_logger, get_context_logger

logger = get_logger(__name__)

CLOUDEVENTS_JSON = "application/cloudevents+json"


class KeptnEventSender(IEventSender):
    """
    Sends task CloudEvents to the Keptn event broker.

    Events are posted in structured mode; any transport error or non-2xx
    response is raised as EventSendException.
    """

    def __init__(
        self,
        event_broker_url: str,
        source: str = SERVICE_NAME,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._event_broker_url = event_broker_url
        self._source = source
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    async def send_task_started(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        return await self._send(triggered, get_started_event_type(self._task_of(triggered)), data)

    async def send_task_finished(self, triggered: KeptnCloudEvent, data: EventData) -> KeptnCloudEvent:
        return await self._send(triggered, get_finished_event_type(self._task_of(triggered)), data)

    @staticmethod
    def _task_of(triggered: KeptnCloudEvent) -> str:
        task = triggered.task_name
        if task is None:
            raise EventSendException(
                f"cannot reply to non-task event type '{triggered.type}'",
                {"event_type": triggered.type}
            )
        return task

    async def _send(self, triggered: KeptnCloudEvent, event_type: str, data: EventData) -> KeptnCloudEvent:
        event = KeptnCloudEvent.reply_to(triggered, event_type, self._source, data.to_wire())
        log = get_context_logger(__name__, event.shkeptncontext, triggered.id)

        try:
            client = await self._get_client()
            response = await client.post(
                self._event_broker_url,
                content=json.dumps(event.to_wire()),
                headers={"Content-Type": CLOUDEVENTS_JSON}
            )
        except httpx.HTTPError as e:
            log.error("Failed to send CloudEvent", extra={"event_type": event_type, "error": str(e)})
            raise EventSendException(
                f"could not send {event_type}: {e}",
                {"event_type": event_type}
            )

        if not response.is_success:
            log.error(
                "Event broker rejected CloudEvent",
                extra={"event_type": event_type, "status_code": response.status_code}
            )
            raise EventSendException(
                f"could not send {event_type}: HTTP {response.status_code}",
                {"event_type": event_type, "status_code": response.status_code}
            )

        log.info("CloudEvent sent", extra={"event_type": event_type, "sent_event_id": event.id})
        return event

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None


class ConfigurationServiceResourceStore(IResourceStore):
    """
    Reads service resources from the Keptn configuration service.

    GET /v1/project/{project}/stage/{stage}/service/{service}/resource/{uri}
    answers with the resource content base64-encoded in ``resourceContent``.
    """

    def __init__(
        self,
        configuration_service_url: str,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._base_url = self._normalize_url(configuration_service_url)
        self._http_client = http_client

    @staticmethod
    def _normalize_url(url: str) -> str:
        url = url.strip().rstrip("/")
        if url and "://" not in url:
            url = f"http://{url}"
        return url

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    def _resource_url(self, project: str, stage: str, service: str, resource_uri: str) -> str:
        return (
            f"{self._base_url}/v1/project/{quote(project, safe='')}"
            f"/stage/{quote(stage, safe='')}"
            f"/service/{quote(service, safe='')}"
            f"/resource/{quote(resource_uri, safe='')}"
        )

    async def get_service_resource(
        self,
        project: str,
        stage: str,
        service: str,
        resource_uri: str
    ) -> str:
        if not self._base_url:
            raise ConfigurationServiceException("configuration service URL is not set")

        url = self._resource_url(project, stage, service, resource_uri)
        try:
            client = await self._get_client()
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise ConfigurationServiceException(
                f"could not fetch resource {resource_uri}: {e}",
                {"url": url}
            )

        if response.status_code == 404:
            raise ResourceNotFoundException(
                "Resource",
                resource_uri,
                {"project": project, "stage": stage, "service": service}
            )
        if not response.is_success:
            raise ConfigurationServiceException(
                f"could not fetch resource {resource_uri}: HTTP {response.status_code}",
                {"url": url, "status_code": response.status_code}
            )

        try:
            encoded = response.json()["resourceContent"]
            return base64.b64decode(encoded).decode("utf-8")
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise ConfigurationServiceException(
                f"invalid resource payload for {resource_uri}: {e}",
                {"url": url}
            )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None


class LocalFileSystemResourceStore(IResourceStore):
    """
    Reads resources from a local directory, ignoring project/stage/service.

    Used when running outside the cluster (env=local).
    """

    def __init__(self, base_dir: Path):
        self._base_dir = Path(base_dir)

    async def get_service_resource(
        self,
        project: str,
        stage: str,
        service: str,
        resource_uri: str
    ) -> str:
        path = self._base_dir / resource_uri
        if not path.is_file():
            raise ResourceNotFoundException("Resource", str(path))

        logger.debug("Reading resource from local filesystem", extra={"path": str(path)})
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationException(
                f"could not read resource {path}: {e}",
                {"path": str(path)}
            )
