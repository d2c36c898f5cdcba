"""Minimal observation surface for a finished run.

Read-only. No network calls.
"""

from pathlib import Path
from typing import Optional

from scandium_runner.constants import PASSED, STATUS_ERROR, TIMEOUT
from scandium_runner.results import find_execution_results, read_summary_marker


def _describe(data) -> tuple[str, str, str]:
    """Pull (execution id, running status, status) out of a persisted response."""
    if not isinstance(data, dict):
        return "?", "unreadable", "unreadable"
    details = data.get("data") if isinstance(data.get("data"), dict) else {}
    execution_id = details.get("execution_id") or details.get("id") or "?"
    return str(execution_id), str(details.get("running_status")), str(details.get("status"))


def print_summary(results_dir: Optional[Path] = None) -> None:
    """
    Print a human-readable summary of the last run in results_dir.

    Goal: understand the outcome without opening the JSON files.
    """
    if results_dir is None:
        results_dir = Path(".")

    marker = read_summary_marker(results_dir)
    results = find_execution_results(results_dir)

    print("=" * 60)
    print("SUITE RUN SUMMARY")
    print("=" * 60)
    print()

    if marker is None and not results:
        print("No run results found.")
        print()
        print(f"Searched: {results_dir}")
        return

    print("EXECUTIONS")
    print("-" * 40)
    if results:
        for entry in results:
            execution_id, running_status, status = _describe(entry["data"])
            icon = "✗" if status in (STATUS_ERROR, "unreadable") else "✓"
            print(f"  {icon} {Path(entry['file']).name}")
            if execution_id != "?":
                print(f"      id:      {execution_id}")
            print(f"      running: {running_status}")
            print(f"      status:  {status}")
    else:
        print("  No completed executions recorded.")
    print()

    print("VERDICT")
    print("-" * 40)
    if marker == PASSED:
        print("  ✓ PASSED - All executions completed successfully")
    elif marker == TIMEOUT:
        print("  ⏳ TIMEOUT - Not all executions completed in time")
    elif marker is None:
        print("  ? UNKNOWN - No summary marker (run aborted or still in progress)")
    else:
        print(f"  ✗ {marker} - One or more executions failed")
    print()
