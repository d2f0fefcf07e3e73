"""
SLI Domain Layer
================

Domain layer for the get-sli task.

Contains:
- Entities: TaskRequest, SLIResult, TaskOutcome
- Value Objects: ResolvedWindow, QuantizeSpec, SLIConfig
- Domain Services: TimestampResolver, QueryTemplateEngine, QuantizeClauseParser

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from sli.domain.entities import TaskRequest, SLIResult, TaskOutcome
from sli.domain.value_objects import (
    TimestampResolver,
    ResolvedWindow,
    QuantizeSpec,
    SLIConfig,
    ROLLUPS,
)
from sli.domain.queries import QueryTemplateEngine, QuantizeClauseParser

__all__ = [
    # Entities
    "TaskRequest",
    "SLIResult",
    "TaskOutcome",
    # Value Objects & Services
    "TimestampResolver",
    "ResolvedWindow",
    "QuantizeSpec",
    "SLIConfig",
    "ROLLUPS",
    "QueryTemplateEngine",
    "QuantizeClauseParser",
]
