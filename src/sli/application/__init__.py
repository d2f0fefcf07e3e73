"""
SLI Application Layer
======================

Application layer for the get-sli task.

Contains:
- Services: GetSLIService (task lifecycle)
- Interfaces: IMetricsQueryExecutor, ISLIConfigProvider

This layer depends on the domain layer and interfaces, but not on concrete
infrastructure implementations.
"""

from sli.application.services import (
    GetSLIService,
    IMetricsQueryExecutor,
    ISLIConfigProvider,
    METRICS_ROW_ID,
)

__all__ = [
    # Services
    "GetSLIService",
    "METRICS_ROW_ID",
    # Interfaces
    "IMetricsQueryExecutor",
    "ISLIConfigProvider",
]
