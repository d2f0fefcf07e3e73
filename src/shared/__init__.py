"""
Shared Kernel Module
====================

This module contains shared infrastructure elements used by both bounded
contexts (Keptn events and SLI retrieval).

Architecture Pattern: Modular Monolith
- Each module (events, sli) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add business logic from events or sli to the shared kernel.
"""

__version__ = "0.1.0"
