"""Persisted run outputs: per-execution results and the summary marker."""

import hashlib
import json
import re
from pathlib import Path
from typing import List, Optional

from scandium_runner.constants import (
    EXECUTION_RESULT_TEMPLATE,
    FAILED,
    PASSED,
    SUMMARY_MARKER_FILE,
    TIMEOUT,
)


def _safe_handle(handle: str) -> str:
    """
    Make an execution id usable as part of a filename.

    Ids that needed rewriting get a short digest suffix so two distinct ids
    never share a file.
    """
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", handle)
    if safe != handle:
        digest = hashlib.sha1(handle.encode("utf-8")).hexdigest()[:8]
        safe = f"{safe}-{digest}"
    return safe


def execution_result_path(results_dir: Path, handle: str) -> Path:
    return results_dir / EXECUTION_RESULT_TEMPLATE.format(handle=_safe_handle(handle))


def write_execution_result(results_dir: Path, handle: str, raw: str) -> Path:
    """
    Write the raw final status response for one execution.

    Filename: execution_result_{handle}.json
    """
    results_dir.mkdir(parents=True, exist_ok=True)
    path = execution_result_path(results_dir, handle)
    path.write_text(raw)
    return path


def write_summary_marker(results_dir: Path, result: str) -> Path:
    """Write the aggregate result (PASSED, FAILED or TIMEOUT) to the marker file."""
    if result not in (PASSED, FAILED, TIMEOUT):
        raise ValueError(f"Unknown aggregate result: {result}")

    results_dir.mkdir(parents=True, exist_ok=True)
    path = results_dir / SUMMARY_MARKER_FILE
    path.write_text(f"{result}\n")
    return path


def clear_summary_marker(results_dir: Path) -> bool:
    """Remove a marker left by a previous run. Returns True if one was removed."""
    path = results_dir / SUMMARY_MARKER_FILE
    if path.exists():
        path.unlink()
        return True
    return False


def clear_previous_results(results_dir: Path) -> int:
    """
    Remove the marker and execution results left by a previous run.

    Returns the number of files removed.
    """
    removed = int(clear_summary_marker(results_dir))
    if not results_dir.exists():
        return removed

    for f in results_dir.glob(EXECUTION_RESULT_TEMPLATE.format(handle="*")):
        f.unlink()
        removed += 1
    return removed


def read_summary_marker(results_dir: Path) -> Optional[str]:
    path = results_dir / SUMMARY_MARKER_FILE
    if not path.exists():
        return None
    return path.read_text().strip() or None


def find_execution_results(results_dir: Path) -> List[dict]:
    """Load all persisted execution results, oldest first."""
    results = []

    if not results_dir.exists():
        return results

    pattern = EXECUTION_RESULT_TEMPLATE.format(handle="*")
    for f in sorted(results_dir.glob(pattern), key=lambda p: p.stat().st_mtime):
        try:
            data = json.loads(f.read_text())
        except (json.JSONDecodeError, IOError):
            data = None
        results.append({"file": str(f), "data": data})

    return results
