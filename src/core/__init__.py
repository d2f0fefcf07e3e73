"""
Core Module
============

Shared core utilities and abstractions used across the service.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    InvalidTimestampException,
    MalformedQueryException,
    UnhandledEventException,
    ResourceNotFoundException,
    ConfigurationException,
    ExternalServiceException,
    EventSendException,
    ConfigurationServiceException,
    MetricsQueryException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "InvalidTimestampException",
    "MalformedQueryException",
    "UnhandledEventException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "ExternalServiceException",
    "EventSendException",
    "ConfigurationServiceException",
    "MetricsQueryException",
]
