"""
SLI Infrastructure Layer
=========================

Infrastructure implementations for the get-sli task:
- External: Sumo Logic metrics API client
- Repositories: sli.yaml configuration provider
"""

from sli.infrastructure.external import SumoLogicMetricsClient
from sli.infrastructure.repositories import YAMLSLIConfigProvider

__all__ = [
    "SumoLogicMetricsClient",
    "YAMLSLIConfigProvider",
]
