"""Tests for outcome aggregation."""

from scandium_runner.aggregator import aggregate
from scandium_runner.execution_state import ExecutionStatus, TimeoutSignal


def final(handle, status):
    return ExecutionStatus(handle, "completed", status)


class TestAggregate:
    def test_all_success_passes(self):
        outcome = aggregate({"a": final("a", "success"), "b": final("b", "success")})
        assert outcome.result == "PASSED"
        assert outcome.exit_code == 0
        assert outcome.passed

    def test_one_error_fails_whole_run(self):
        outcome = aggregate({"a": final("a", "success"), "b": final("b", "error")})
        assert outcome.result == "FAILED"
        assert outcome.exit_code != 0
        assert outcome.failed == ["b"]

    def test_only_error_counts_as_failure(self):
        """Statuses other than "error" do not fail the run."""
        outcome = aggregate({"a": final("a", "skipped"), "b": final("b", None)})
        assert outcome.result == "PASSED"

    def test_timeout(self):
        signal = TimeoutSignal(attempts=30, pending=("b",), completed={"a": final("a", "error")})
        outcome = aggregate(signal)
        assert outcome.result == "TIMEOUT"
        assert outcome.exit_code != 0
        assert outcome.pending == ["b"]
        assert not outcome.passed
