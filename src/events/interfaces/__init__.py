"""
Events Interfaces Layer
=======================

Interface adapters (controllers) for the events module.

This is the outermost layer - handles HTTP requests/responses and
delegates to the event dispatcher.
"""

from events.interfaces.controllers import create_event_router, decode_cloud_event, health_router

__all__ = ["create_event_router", "decode_cloud_event", "health_router"]
