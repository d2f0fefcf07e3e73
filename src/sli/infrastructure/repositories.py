"""
SLI Infrastructure Repositories
=================================

Loads the sli.yaml query configuration of a service from the Keptn config repo.
"""

from typing import Dict

import yaml
from pydantic import ValidationError

from config import SLI_RESOURCE_URI
from core import ConfigurationException
from events.application import IResourceStore
from sli.application import ISLIConfigProvider
from sli.domain import SLIConfig


class YAMLSLIConfigProvider(ISLIConfigProvider):
    """
    SLI configuration provider backed by a YAML resource.

    The resource is fetched on every call so that changes in the config repo
    apply to the next evaluation.
    """

    def __init__(self, resource_store: IResourceStore, resource_uri: str = SLI_RESOURCE_URI):
        self._resource_store = resource_store
        self._resource_uri = resource_uri

    async def get_sli_config(self, project: str, stage: str, service: str) -> Dict[str, str]:
        """
        Get query templates by indicator name.

        Raises:
            ResourceNotFoundException: sli.yaml does not exist for the service
            ConfigurationServiceException: Configuration service failure
            ConfigurationException: sli.yaml is not valid
        """
        content = await self._resource_store.get_service_resource(
            project, stage, service, self._resource_uri
        )
        return self.parse(content, self._resource_uri).indicators

    @staticmethod
    def parse(content: str, resource_uri: str = SLI_RESOURCE_URI) -> SLIConfig:
        """Parse sli.yaml content."""
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"{resource_uri} is not valid YAML: {e}")

        if not isinstance(data, dict):
            raise ConfigurationException(f"{resource_uri} must be a YAML mapping")

        try:
            return SLIConfig(**data)
        except (ValidationError, TypeError) as e:
            raise ConfigurationException(f"{resource_uri} is not a valid SLI configuration: {e}")
