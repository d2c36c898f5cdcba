"""Thin suite runner.

Builds the request, submits it, polls every execution, writes the results.
"""

import os
import time
from typing import Callable, Optional, Sequence

from scandium_runner.aggregator import AggregateOutcome, aggregate
from scandium_runner.api_client import ScandiumClient, get_scandium_client
from scandium_runner.config import Config
from scandium_runner.constants import DEBUG_ENV_VAR, FAILED, TIMEOUT
from scandium_runner.execution_state import ExecutionStatus
from scandium_runner.poller import poll_executions
from scandium_runner.request_builder import request_from_config
from scandium_runner.results import (
    clear_previous_results,
    write_execution_result,
    write_summary_marker,
)


def wait_for_executions(
    config: Config,
    handles: Sequence[str],
    client: Optional[ScandiumClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> AggregateOutcome:
    """
    Poll already submitted executions to completion and record the outcome.

    Writes execution_result_{id}.json for each completed execution and the
    summary marker once polling ends. Errors propagate without a marker.
    """
    if client is None:
        client = get_scandium_client(config)

    results_dir = config.results_dir
    clear_previous_results(results_dir)

    def persist(status: ExecutionStatus) -> None:
        write_execution_result(results_dir, status.handle, status.raw)

    poll_result = poll_executions(
        client,
        handles,
        project_id=config.project_id,
        wait_period=config.wait_period,
        max_attempts=config.max_attempts,
        sleep=sleep,
        on_terminal=persist,
    )

    outcome = aggregate(poll_result)
    write_summary_marker(results_dir, outcome.result)

    if outcome.result == TIMEOUT:
        print("Not all executions completed within the timeout period.")
        print(f"  Still running: {', '.join(outcome.pending)}")
    else:
        final_statuses = " ".join(str(s.status) for s in outcome.statuses.values())
        print(f"All executions completed. Final statuses: {final_statuses}")
        if outcome.result == FAILED:
            print(f"One or more executions have failed: {', '.join(outcome.failed)}")
        else:
            print("All executions completed successfully.")

    return outcome


def run_suite(
    config: Config,
    client: Optional[ScandiumClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> AggregateOutcome:
    """
    Main entry point: submit the suite, poll every execution, aggregate.

    Args:
        config: Loaded configuration
        client: API client (default: built from config)
        sleep: Sleep function used between polling rounds

    Returns:
        Final AggregateOutcome
    """
    if client is None:
        client = get_scandium_client(config)

    # An aborted run must not leave the previous run's files behind
    clear_previous_results(config.results_dir)

    request = request_from_config(config)
    print(f"Request body: {request.to_json()}")

    submission = client.execute_suite(request)
    if os.environ.get(DEBUG_ENV_VAR):
        print(f"Raw API response: {submission.raw}")
    print(f"Execution IDs: {', '.join(submission.handles)}")

    return wait_for_executions(config, submission.handles, client=client, sleep=sleep)
