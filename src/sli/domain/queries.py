"""
SLI Query Processing
=====================

Turns an sli.yaml query template into something the Sumo Logic metrics API
accepts:

1. QueryTemplateEngine fills in the $PLACEHOLDERS
2. QuantizeClauseParser removes our ``quantize to <interval> using <rollup>``
   operator, which the API takes as separate request fields instead

Both are stateless.
"""

import re
from typing import Tuple

from core import MalformedQueryException
from sli.domain.entities import TaskRequest
from sli.domain.value_objects import ResolvedWindow, QuantizeSpec, ROLLUPS


class QueryTemplateEngine:
    """Literal placeholder substitution for query templates."""

    @staticmethod
    def render(template: str, request: TaskRequest, window: ResolvedWindow) -> str:
        """
        Replace every occurrence of the context placeholders.

        $PROJECT/$project, $STAGE/$stage and $SERVICE/$service take the
        request's values; $DURATION takes the window length in seconds.
        """
        replacements = (
            ("$PROJECT", request.project),
            ("$STAGE", request.stage),
            ("$SERVICE", request.service),
            ("$project", request.project),
            ("$stage", request.stage),
            ("$service", request.service),
            ("$DURATION", str(window.duration_seconds)),
        )
        query = template
        for placeholder, value in replacements:
            query = query.replace(placeholder, value)
        return query


class QuantizeClauseParser:
    """
    Extracts the quantize clause from a metrics query.

    Grammar:
        quantize to <digits><unit> using <rollup> [|]

    where unit is s, m or h and rollup is one of avg, min, max, sum, count.
    See https://help.sumologic.com/Metrics/Metric-Queries-and-Alerts/07Metrics_Operators/quantize
    """

    KEYWORD = "quantize"
    CLAUSE_PATTERN = r"quantize\s+to\s+(\d+)([a-z])\s+using\s+([a-z]+)\s*\|?"

    _CLAUSE = re.compile(r"\s*" + CLAUSE_PATTERN + r"\s*")
    _UNIT_MILLIS = {"s": 1_000, "m": 60_000, "h": 3_600_000}

    @classmethod
    def parse(cls, query: str) -> Tuple[str, QuantizeSpec]:
        """
        Split a query into the executable part and its quantization.

        Example:
            "foo | quantize to 5m using avg | bar"
            -> ("foo | bar", QuantizeSpec(interval_millis=300000, rollup="Avg"))

        Raises:
            MalformedQueryException: Not exactly one clause, or a clause that
                does not follow the grammar
        """
        if query.count(cls.KEYWORD) != 1:
            raise MalformedQueryException("expected exactly one quantize clause", query)

        match = cls._CLAUSE.search(query)
        if match is None:
            raise MalformedQueryException(
                f"quantize clause should match the pattern `{cls.CLAUSE_PATTERN}`",
                query
            )

        amount, unit, rollup_token = match.groups()
        if unit not in cls._UNIT_MILLIS:
            raise MalformedQueryException(
                f"unsupported quantize interval unit '{unit}', expected one of s, m, h",
                query
            )

        rollup = rollup_token.title()
        if rollup not in ROLLUPS:
            raise MalformedQueryException(
                f"unsupported quantize rollup '{rollup_token}', expected one of "
                f"{', '.join(r.lower() for r in ROLLUPS)}",
                query
            )

        rewritten = (query[:match.start()] + " " + query[match.end():]).strip()
        if rewritten.endswith("|"):
            rewritten = rewritten[:-1].rstrip()
        if not rewritten:
            raise MalformedQueryException("query is empty once the quantize clause is removed", query)

        return rewritten, QuantizeSpec(
            interval_millis=int(amount) * cls._UNIT_MILLIS[unit],
            rollup=rollup
        )
