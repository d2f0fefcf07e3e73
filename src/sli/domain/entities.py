"""
SLI Domain Entities
====================

Pure Python domain entities for one get-sli task run.

All of them live for a single task invocation; nothing is persisted.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from config import TaskStatus, TaskResult


@dataclass(frozen=True)
class TaskRequest:
    """
    A get-sli request as received from Keptn.

    ``start`` and ``end`` are kept as given; they are resolved into a
    ResolvedWindow by the task lifecycle.
    """

    project: str
    stage: str
    service: str
    sli_provider: str
    start: str
    end: str
    indicators: Tuple[str, ...] = ()
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class SLIResult:
    """Value of one indicator."""
    metric: str
    value: float


@dataclass
class TaskOutcome:
    """
    Result of a get-sli task, reported in the finished event.

    Starts out succeeded/pass; any failed indicator degrades it to
    errored/fail without discarding the values already collected.
    """

    start: str
    end: str
    labels: Dict[str, str] = field(default_factory=dict)
    status: TaskStatus = TaskStatus.SUCCEEDED
    result: TaskResult = TaskResult.PASS
    indicator_values: List[SLIResult] = field(default_factory=list)
    failed_indicators: List[str] = field(default_factory=list)
    message: str = ""

    @classmethod
    def errored(cls, start: str, end: str, labels: Dict[str, str], message: str) -> "TaskOutcome":
        """Outcome of a task that could not query any indicator."""
        return cls(
            start=start,
            end=end,
            labels=labels,
            status=TaskStatus.ERRORED,
            result=TaskResult.FAIL,
            message=message,
        )

    def record_value(self, metric: str, value: float) -> None:
        self.indicator_values.append(SLIResult(metric=metric, value=value))

    def record_failure(self, indicator: str) -> None:
        """Mark an indicator as failed; it is left out of indicator_values."""
        self.failed_indicators.append(indicator)
        self.status = TaskStatus.ERRORED
        self.result = TaskResult.FAIL
        self.message = f"failed to retrieve SLI(s): {', '.join(self.failed_indicators)}"
