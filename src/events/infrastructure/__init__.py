"""
Events Infrastructure Layer
============================

Implementations of the Keptn interfaces:
- KeptnEventSender: posts CloudEvents to the event broker
- ConfigurationServiceResourceStore / LocalFileSystemResourceStore: resource access
"""

from events.infrastructure.external import (
    KeptnEventSender,
    ConfigurationServiceResourceStore,
    LocalFileSystemResourceStore,
)

__all__ = [
    "KeptnEventSender",
    "ConfigurationServiceResourceStore",
    "LocalFileSystemResourceStore",
]
