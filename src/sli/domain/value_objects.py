"""
SLI Value Objects
==================

Immutable value objects for the SLI domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from core import InvalidTimestampException

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)
_EPOCH_SECONDS = re.compile(r"[+-]?\d+")

ROLLUPS = ("Avg", "Min", "Max", "Sum", "Count")


class TimestampResolver:
    """
    Parses the start/end strings of a get-sli request.

    Accepted formats, tried in order:
    1. RFC 3339 date-time with offset, e.g. ``2021-01-02T15:04:05Z``
    2. Integer seconds since the Unix epoch (UTC), e.g. ``1609599845``
    """

    @staticmethod
    def resolve(timestamp: str) -> datetime:
        """
        Resolve a timestamp string into a timezone-aware datetime.

        Raises:
            InvalidTimestampException: Neither format matches
        """
        if _RFC3339.fullmatch(timestamp):
            try:
                return datetime.fromisoformat(timestamp.upper())
            except ValueError:
                pass

        if _EPOCH_SECONDS.fullmatch(timestamp):
            try:
                return datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                pass

        raise InvalidTimestampException(timestamp)


@dataclass(frozen=True)
class ResolvedWindow:
    """
    Absolute time range an SLI is evaluated over.

    ``end`` is not required to be after ``start``; the duration is used as is.
    """
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> int:
        """Length of the window in whole seconds, rounded up."""
        return math.ceil((self.end - self.start).total_seconds())

    @property
    def start_millis(self) -> int:
        return (self.start - _EPOCH) // timedelta(milliseconds=1)

    @property
    def end_millis(self) -> int:
        return (self.end - _EPOCH) // timedelta(milliseconds=1)

    @classmethod
    def resolve(cls, start: str, end: str) -> "ResolvedWindow":
        return cls(TimestampResolver.resolve(start), TimestampResolver.resolve(end))


@dataclass(frozen=True)
class QuantizeSpec:
    """Bucketing interval and rollup extracted from a quantize clause."""
    interval_millis: int
    rollup: str


class SLIConfig(BaseModel):
    """
    Contents of sumologic-service/sli.yaml.

    Example:
        spec_version: "1.0"
        indicators:
          throughput: "metric=http_requests service=$SERVICE | quantize to 1m using sum"
    """
    spec_version: Optional[str] = Field(default=None, description="sli.yaml format version")
    indicators: Dict[str, str] = Field(
        default_factory=dict,
        description="Query template by indicator name"
    )

    @field_validator("spec_version", mode="before")
    @classmethod
    def stringify_spec_version(cls, v):
        return None if v is None else str(v)

    @field_validator("indicators", mode="before")
    @classmethod
    def default_indicators(cls, v):
        return v or {}
