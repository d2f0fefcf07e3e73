"""
Core Exceptions
================

Custom exceptions for the service.

These exceptions name the failure kinds of a task run so they can be caught
and handled at the right boundary: the get-sli lifecycle absorbs some of them
into the finished event, the rest reach the CloudEvent receiver.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(ApplicationException):
    """Exception for validation errors (e.g. an undecodable event payload)."""


class InvalidTimestampException(DomainException):
    """A timestamp is neither an RFC 3339 date-time nor an integer epoch."""

    def __init__(self, timestamp: str, details: Optional[dict] = None):
        self.timestamp = timestamp
        super().__init__(
            f"unable to parse timestamp '{timestamp}': expected RFC 3339 or epoch seconds",
            details or {"timestamp": timestamp}
        )


class MalformedQueryException(DomainException):
    """A query does not carry exactly one well-formed quantize clause."""

    def __init__(self, reason: str, query: str, details: Optional[dict] = None):
        self.reason = reason
        self.query = query
        super().__init__(reason, details or {"query": query})


class UnhandledEventException(ApplicationException):
    """No handler is registered for an incoming event type."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"Unhandled Keptn Cloud Event: {event_type}", {"event_type": event_type})


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors (e.g. an unreadable sli.yaml)."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class EventSendException(ExternalServiceException):
    """Sending a CloudEvent to the Keptn event broker failed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Event Broker", message, details)


class ConfigurationServiceException(ExternalServiceException):
    """The Keptn configuration service could not be reached or answered badly."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Configuration Service", message, details)


class MetricsQueryException(ExternalServiceException):
    """Running a metrics query against Sumo Logic failed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Sumo Logic", message, details)
