"""Tests for persisted run outputs."""

import pytest

from scandium_runner.results import (
    clear_previous_results,
    clear_summary_marker,
    execution_result_path,
    find_execution_results,
    read_summary_marker,
    write_execution_result,
    write_summary_marker,
)


class TestSummaryMarker:
    @pytest.mark.parametrize("result", ["PASSED", "FAILED", "TIMEOUT"])
    def test_write_and_read(self, tmp_path, result):
        path = write_summary_marker(tmp_path, result)
        assert path.name == "test_result.txt"
        assert path.read_text().strip() == result
        assert read_summary_marker(tmp_path) == result

    def test_unknown_result_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            write_summary_marker(tmp_path, "PARTIAL")

    def test_clear(self, tmp_path):
        write_summary_marker(tmp_path, "FAILED")
        assert clear_summary_marker(tmp_path) is True
        assert read_summary_marker(tmp_path) is None
        assert clear_summary_marker(tmp_path) is False

    def test_creates_results_dir(self, tmp_path):
        target = tmp_path / "out" / "nested"
        write_summary_marker(target, "PASSED")
        assert read_summary_marker(target) == "PASSED"


class TestExecutionResults:
    def test_raw_body_written_verbatim(self, tmp_path):
        raw = '{"data": {"running_status": "completed", "status": "success"}}'
        path = write_execution_result(tmp_path, "abc-123", raw)
        assert path.name == "execution_result_abc-123.json"
        assert path.read_text() == raw

    def test_handle_sanitized_for_filename(self, tmp_path):
        path = execution_result_path(tmp_path, "../evil/id")
        assert path.parent == tmp_path
        assert "/" not in path.name[len("execution_result_"):]

    def test_distinct_handles_never_share_a_file(self, tmp_path):
        first = write_execution_result(tmp_path, "a/b", "first")
        second = write_execution_result(tmp_path, "a_b", "second")

        assert first != second
        assert first.read_text() == "first"
        assert second.read_text() == "second"

    def test_plain_handle_keeps_plain_filename(self, tmp_path):
        assert execution_result_path(tmp_path, "a_b").name == "execution_result_a_b.json"

    def test_find_results(self, tmp_path):
        write_execution_result(tmp_path, "a", '{"data": {"status": "success"}}')
        write_execution_result(tmp_path, "b", "not json")

        results = find_execution_results(tmp_path)

        assert len(results) == 2
        by_name = {r["file"].rsplit("/", 1)[-1]: r["data"] for r in results}
        assert by_name["execution_result_a.json"] == {"data": {"status": "success"}}
        assert by_name["execution_result_b.json"] is None

    def test_find_results_missing_dir(self, tmp_path):
        assert find_execution_results(tmp_path / "missing") == []


class TestClearPreviousResults:
    def test_removes_marker_and_results_only(self, tmp_path):
        write_summary_marker(tmp_path, "PASSED")
        write_execution_result(tmp_path, "old-1", "{}")
        write_execution_result(tmp_path, "old-2", "{}")
        (tmp_path / "notes.txt").write_text("keep me")

        assert clear_previous_results(tmp_path) == 3

        assert read_summary_marker(tmp_path) is None
        assert find_execution_results(tmp_path) == []
        assert (tmp_path / "notes.txt").exists()

    def test_missing_dir(self, tmp_path):
        assert clear_previous_results(tmp_path / "missing") == 0
