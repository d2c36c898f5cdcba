"""Reduce per-execution statuses to one run outcome."""

from dataclasses import dataclass, field
from typing import Dict, List

from scandium_runner.constants import FAILED, PASSED, STATUS_ERROR, TIMEOUT
from scandium_runner.execution_state import ExecutionStatus, TimeoutSignal
from scandium_runner.poller import PollResult


@dataclass
class AggregateOutcome:
    result: str  # PASSED | FAILED | TIMEOUT
    exit_code: int
    failed: List[str] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)
    statuses: Dict[str, ExecutionStatus] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.result == PASSED


def aggregate(result: PollResult) -> AggregateOutcome:
    """
    Reduce a poll result to PASSED, FAILED or TIMEOUT.

    A single "error" status fails the whole run. There is no partial success.
    """
    if isinstance(result, TimeoutSignal):
        return AggregateOutcome(
            result=TIMEOUT,
            exit_code=1,
            pending=list(result.pending),
            statuses=dict(result.completed),
        )

    failed = [handle for handle, status in result.items() if status.status == STATUS_ERROR]

    if failed:
        return AggregateOutcome(result=FAILED, exit_code=1, failed=failed, statuses=dict(result))

    return AggregateOutcome(result=PASSED, exit_code=0, statuses=dict(result))
