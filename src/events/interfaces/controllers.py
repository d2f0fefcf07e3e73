"""
Events Controllers (API Routes)
================================

FastAPI routes for the CloudEvent receiver and the health endpoints.

Controllers are thin - they decode the request and delegate to the
EventDispatcher stored on the application state.
"""

import json
from typing import Mapping

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from core import ValidationException
from events.application import EventDispatcher
from events.domain import KeptnCloudEvent
from shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

health_router = APIRouter(tags=["Health"])


def decode_cloud_event(headers: Mapping[str, str], body: bytes) -> KeptnCloudEvent:
    """
    Decode a CloudEvent from an HTTP request.

    Binary mode carries the attributes in ``ce-*`` headers and the data in the
    body; structured mode carries the whole event as a JSON document.

    Raises:
        ValidationException: The request is not a valid CloudEvent
    """
    try:
        if "ce-type" in headers:
            attributes = {
                key[3:]: value
                for key, value in headers.items()
                if key.lower().startswith("ce-")
            }
            attributes["data"] = json.loads(body) if body else None
            attributes["datacontenttype"] = headers.get("content-type", "application/json")
        else:
            attributes = json.loads(body)
            if not isinstance(attributes, dict):
                raise ValidationException("CloudEvent must be a JSON object")
        return KeptnCloudEvent.model_validate(attributes)
    except ValueError as e:
        logger.warning("Could not decode CloudEvent", extra={"error": str(e)})
        raise ValidationException(f"Could not decode CloudEvent: {e}")


def create_event_router(rcv_path: str) -> APIRouter:
    """Build the router receiving CloudEvents on ``rcv_path``."""
    router = APIRouter(tags=["CloudEvents"])

    @router.post(rcv_path)
    async def receive_event(request: Request):
        """Receive one CloudEvent and handle it before acknowledging."""
        event = decode_cloud_event(request.headers, await request.body())
        request.state.keptn_context = event.shkeptncontext

        dispatcher: EventDispatcher = request.app.state.dispatcher
        await dispatcher.dispatch(event)

        return {"status": "OK"}

    return router


@health_router.get("/health")
@health_router.get("/ready")
async def health_check():
    """Liveness and readiness probe."""
    return {"status": "OK"}


@health_router.get("/{path:path}", include_in_schema=False)
async def endpoint_not_found(path: str):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"status": "NOT FOUND"})
