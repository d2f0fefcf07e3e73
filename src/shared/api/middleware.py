"""
Shared API Middleware
======================

Common middleware and exception handlers for the FastAPI application.
"""

import time
from datetime import datetime, timezone
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core import ApplicationException, UnhandledEventException, ValidationException
from shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs all requests and responses.

    Provides audit trail and debugging information.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        logger.debug(
            "Request started",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)

            response_time = time.perf_counter() - start_time
            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "response_time_ms": int(response_time * 1000)
                }
            )

            return response

        except Exception as e:
            response_time = time.perf_counter() - start_time
            logger.error(
                "Request failed",
                extra={
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(e),
                    "response_time_ms": int(response_time * 1000)
                }
            )
            raise


def _keptn_context(request: Request) -> str:
    return getattr(request.state, "keptn_context", "") or ""


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    """
    Map application errors raised while handling an event to HTTP responses.

    Bad input (undecodable or unroutable events) is a 400, anything else a 500.
    """
    status_code = 400 if isinstance(exc, (ValidationException, UnhandledEventException)) else 500

    logger.error(
        "Event handling failed",
        extra={
            "keptn_context": _keptn_context(request),
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error_message": exc.message
        }
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_type": type(exc).__name__,
            "keptn_context": _keptn_context(request),
        }
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.

    Returns consistent error responses for all exceptions.
    """
    logger.error(
        "Unhandled exception",
        extra={
            "keptn_context": _keptn_context(request),
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "keptn_context": _keptn_context(request),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
