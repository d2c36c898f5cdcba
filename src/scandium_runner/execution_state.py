"""Execution state for the polling loop."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from scandium_runner.constants import RUNNING_STATUS_COMPLETED


@dataclass(frozen=True)
class ExecutionStatus:
    handle: str
    running_status: Optional[str] = None  # pending | running | completed | ...
    status: Optional[str] = None  # success | error | ... (final only once completed)
    raw: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.running_status == RUNNING_STATUS_COMPLETED


@dataclass(frozen=True)
class TimeoutSignal:
    """Polling budget exhausted with at least one execution still running."""
    attempts: int
    pending: Tuple[str, ...]
    completed: Dict[str, ExecutionStatus] = field(default_factory=dict)


@dataclass
class PollState:
    """Terminal statuses recorded so far, plus the number of rounds run."""
    handles: Tuple[str, ...]
    attempts: int = 0
    terminal: Dict[str, ExecutionStatus] = field(default_factory=dict)

    def record(self, status: ExecutionStatus) -> bool:
        """
        Record a terminal status for its handle.

        Returns True only the first time a handle becomes terminal.
        A recorded terminal status is never overwritten.
        """
        if not status.is_terminal or status.handle in self.terminal:
            return False
        self.terminal[status.handle] = status
        return True

    @property
    def pending(self) -> Tuple[str, ...]:
        return tuple(h for h in self.handles if h not in self.terminal)

    @property
    def all_terminal(self) -> bool:
        return not self.pending
