"""Polling loop for submitted suite executions.

Fixed interval, bounded rounds, fail-fast on malformed responses.
"""

import os
import time
from typing import Callable, Dict, Optional, Sequence, Union

from scandium_runner.api_client import ScandiumClient
from scandium_runner.constants import DEBUG_ENV_VAR
from scandium_runner.execution_state import ExecutionStatus, PollState, TimeoutSignal


PollResult = Union[Dict[str, ExecutionStatus], TimeoutSignal]


def poll_round(
    client: ScandiumClient,
    state: PollState,
    project_id: str,
    on_terminal: Optional[Callable[[ExecutionStatus], None]] = None,
) -> Dict[str, ExecutionStatus]:
    """
    Query every handle that is not yet terminal, once.

    Returns this round's observations. Handles that become terminal are
    recorded in state and passed to on_terminal exactly once.
    A ProtocolError from any handle propagates and ends the whole poll.
    """
    observed: Dict[str, ExecutionStatus] = {}

    for handle in state.pending:
        print(f"Polling execution ID: {handle}")
        status = client.get_execution(handle, project_id)

        if os.environ.get(DEBUG_ENV_VAR):
            print(f"Raw response for execution ID {handle}: {status.raw}")
        print(
            f"Execution ID {handle} - Running Status: {status.running_status}, "
            f"Final Status: {status.status}"
        )

        observed[handle] = status
        if state.record(status) and on_terminal is not None:
            on_terminal(status)

    return observed


def poll_executions(
    client: ScandiumClient,
    handles: Sequence[str],
    project_id: str,
    wait_period: float,
    max_attempts: int,
    sleep: Callable[[float], None] = time.sleep,
    on_terminal: Optional[Callable[[ExecutionStatus], None]] = None,
) -> PollResult:
    """
    Poll all executions until every one is completed or the budget runs out.

    Logic:
    1. Run up to max_attempts rounds over the handles still running
    2. Stop as soon as every handle has been seen completed
    3. Otherwise sleep exactly wait_period seconds before the next round

    No backoff. No sleep after the final round.

    Returns:
        handle -> final ExecutionStatus (in submission order), or a
        TimeoutSignal if some handle never completed.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if not handles:
        raise ValueError("At least one execution handle is required")

    state = PollState(handles=tuple(handles))

    while state.attempts < max_attempts:
        print(f"Polling attempt #{state.attempts + 1}")
        poll_round(client, state, project_id, on_terminal=on_terminal)
        state.attempts += 1

        if state.all_terminal:
            break

        if state.attempts < max_attempts:
            print("Waiting before the next polling attempt...")
            sleep(wait_period)

    if not state.all_terminal:
        return TimeoutSignal(
            attempts=state.attempts,
            pending=state.pending,
            completed=dict(state.terminal),
        )

    return {handle: state.terminal[handle] for handle in state.handles}
