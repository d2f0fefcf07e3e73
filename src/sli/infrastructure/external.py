"""
Sumo Logic Metrics API Client
==============================

Runs metrics queries through POST /v1/metricsQueries.

See https://api.sumologic.com/docs/#operation/runMetricsQueries
"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from config import Settings
from core import MetricsQueryException
from sli.application import IMetricsQueryExecutor
from sli.domain import ResolvedWindow
from shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


class SumoLogicMetricsClient(IMetricsQueryExecutor):
    """
    Sumo Logic metrics client authenticating with an access id / key pair.

    Every failure (transport, HTTP status, unexpected payload) is raised as
    MetricsQueryException.
    """

    def __init__(
        self,
        api_url: str,
        access_id: str,
        access_key: str,
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._api_url = api_url.rstrip("/")
        self._auth = (access_id, access_key)
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SumoLogicMetricsClient":
        return cls(
            api_url=settings.sumo_api_url,
            access_id=settings.access_id,
            access_key=settings.access_key,
            timeout_seconds=settings.sumo_timeout_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout_seconds)
        return self._http_client

    @staticmethod
    def build_request(
        query: str,
        row_id: str,
        quantization_millis: int,
        rollup: str,
        start: datetime,
        end: datetime
    ) -> Dict[str, Any]:
        """Build the runMetricsQueries request body for a single query row."""
        window = ResolvedWindow(start, end)
        return {
            "queries": [
                {
                    "query": query,
                    "rowId": row_id,
                    "quantization": quantization_millis,
                    "rollup": rollup,
                }
            ],
            "timeRange": {
                "type": "BeginBoundedTimeRange",
                "from": {
                    "type": "EpochTimeRangeBoundary",
                    "epochMillis": window.start_millis,
                    "rangeName": "from",
                },
                "to": {
                    "type": "EpochTimeRangeBoundary",
                    "epochMillis": window.end_millis,
                    "rangeName": "to",
                },
            },
        }

    @staticmethod
    def first_data_point(payload: Dict[str, Any]) -> float:
        """
        Extract the first value of the first time series of the first row.

        Raises:
            MetricsQueryException: The response holds no data point
        """
        try:
            value = payload["queryResult"][0]["timeSeriesList"]["timeSeries"][0]["points"]["values"][0]
            return float(value)
        except (KeyError, IndexError, TypeError, ValueError):
            raise MetricsQueryException(
                "response contains no data points",
                {"errors": payload.get("errors") if isinstance(payload, dict) else None}
            )

    async def run_query(
        self,
        query: str,
        row_id: str,
        quantization_millis: int,
        rollup: str,
        start: datetime,
        end: datetime
    ) -> float:
        body = self.build_request(query, row_id, quantization_millis, rollup, start, end)
        url = f"{self._api_url}/v1/metricsQueries"

        try:
            client = await self._get_client()
            with log_latency(logger, "metrics_query", row_id=row_id):
                response = await client.post(url, json=body, auth=self._auth)
        except httpx.HTTPError as e:
            raise MetricsQueryException(f"request failed: {e}", {"url": url})

        if not response.is_success:
            logger.debug(
                "Metrics query response",
                extra={"status_code": response.status_code, "response_text": response.text[:500]}
            )
            raise MetricsQueryException(
                f"HTTP {response.status_code}",
                {"url": url, "status_code": response.status_code}
            )

        try:
            payload = response.json()
        except ValueError:
            raise MetricsQueryException("response is not valid JSON", {"url": url})

        return self.first_data_point(payload)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
