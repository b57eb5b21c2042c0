"""
Tests for the batch driver.
"""

import logging

import pytest

from src.signal_planner import DemandOptions, decode_plan, process_file, run_batch
from src.signal_planner.pipeline import TaskLogger, output_path_for


@pytest.fixture
def inputs(tmp_path, loop_text, cross_text):
    """Two valid simulation files and one malformed file."""
    in_dir = tmp_path / "in"
    in_dir.mkdir()
    (in_dir / "a.txt").write_text(loop_text)
    (in_dir / "b.txt").write_text(cross_text)
    (in_dir / "broken.txt").write_text("6 4 5")
    return in_dir


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


class TestProcessFile:
    """Tests for planning a single file."""

    def test_writes_plan(self, inputs, out_dir):
        result = process_file(inputs / "a.txt", out_dir)

        assert result.success is True
        assert result.error is None
        assert result.intersection_count == 3
        assert result.output_path == str(out_dir / "a.txt")
        with open(result.output_path) as fd:
            assert decode_plan(fd) == {
                0: {"rue-d-athenes": 1},
                1: {"rue-de-londres": 1},
                2: {"rue-d-amsterdam": 1},
            }

    def test_parse_error_reported(self, inputs, out_dir, caplog):
        with caplog.at_level(logging.ERROR):
            result = process_file(inputs / "broken.txt", out_dir)

        assert result.success is False
        assert result.output_path is None
        assert "header" in result.error
        assert not (out_dir / "broken.txt").exists()
        assert "broken.txt | Failed to parse" in caplog.text

    def test_invalid_utf8_reported_as_parse_error(self, inputs, out_dir, caplog):
        path = inputs / "latin1.txt"
        path.write_bytes(b"6 1 1 1 0\n0 1 caf\xe9 1\n1 caf\xe9\n")

        with caplog.at_level(logging.ERROR):
            result = process_file(path, out_dir)

        assert result.success is False
        assert result.error.startswith("parse error: could not parse street 0")
        assert "latin1.txt | Failed to parse" in caplog.text
        assert not (out_dir / "latin1.txt").exists()

    def test_missing_input(self, inputs, out_dir):
        result = process_file(inputs / "missing.txt", out_dir)
        assert result.success is False
        assert "I/O error" in result.error

    def test_missing_output_dir(self, inputs, tmp_path):
        result = process_file(inputs / "a.txt", tmp_path / "nowhere")
        assert result.success is False
        assert "I/O error" in result.error

    def test_invalid_cap(self, inputs, out_dir):
        result = process_file(inputs / "a.txt", out_dir, max_green_time=0)
        assert result.success is False
        assert "invalid parameters" in result.error
        assert not (out_dir / "a.txt").exists()

    def test_options_applied(self, inputs, out_dir):
        options = DemandOptions(drop_worst_percent=50)
        result = process_file(inputs / "b.txt", out_dir, options=options)
        assert result.success is True
        # Only the car with slack is kept: intersection 3 loses all demand.
        assert result.intersection_count == 3


class TestRunBatch:
    """Tests for concurrent batch planning."""

    def test_failure_does_not_affect_siblings(self, inputs, out_dir):
        paths = [inputs / "a.txt", inputs / "broken.txt", inputs / "b.txt"]
        results = run_batch(paths, out_dir, max_workers=2)

        assert [r.success for r in results] == [True, False, True]
        assert [r.input_path for r in results] == [str(p) for p in paths]
        assert (out_dir / "a.txt").exists()
        assert (out_dir / "b.txt").exists()
        assert not (out_dir / "broken.txt").exists()

    def test_empty_batch(self, out_dir):
        assert run_batch([], out_dir) == []

    def test_single_worker(self, inputs, out_dir):
        results = run_batch([inputs / "a.txt", inputs / "b.txt"], out_dir, max_workers=1)
        assert all(r.success for r in results)

    def test_repeatable(self, inputs, tmp_path):
        """Planning the same input twice gives identical bytes."""
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        run_batch([inputs / "b.txt"], first)
        run_batch([inputs / "b.txt"], second)
        assert (first / "b.txt").read_bytes() == (second / "b.txt").read_bytes()


class TestHelpers:
    """Tests for driver helpers."""

    def test_output_path_uses_base_name(self, tmp_path):
        assert output_path_for("/data/inputs/c.txt", tmp_path) == tmp_path / "c.txt"

    def test_task_logger_prefix(self, caplog):
        log = TaskLogger(logging.getLogger("test.task"), {"input": "x.txt"})
        with caplog.at_level(logging.INFO, logger="test.task"):
            log.info("hello %s", "world")
        assert "x.txt | hello world" in caplog.text
