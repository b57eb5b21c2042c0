"""
Tests for plan encoding.
"""

import io

import pytest

from src.signal_planner import (
    allocate,
    compute_street_weights,
    decode_plan,
    decode_text,
    encode,
    encode_to_string,
    write_plan,
)
from src.signal_planner.allocator import group_by_intersection
from src.signal_planner.models import IntersectionItem, SignalPlan


def _plan_for(text: str) -> SignalPlan:
    sim = decode_text(text)
    return allocate(sim, compute_street_weights(sim), sim.duration)


class TestEncode:
    """Tests for the output format."""

    def test_loop_scenario_text(self, loop_text):
        assert encode_to_string(_plan_for(loop_text)) == (
            "3\n"
            "0\n1\nrue-d-athenes 1\n"
            "1\n1\nrue-de-londres 1\n"
            "2\n1\nrue-d-amsterdam 1\n"
        )

    def test_streets_sorted_by_name(self, cross_text):
        assert encode_to_string(_plan_for(cross_text)) == (
            "4\n"
            "0\n1\nrue-de-londres 1\n"
            "1\n2\nrue-d-amsterdam 1\nrue-d-athenes 1\n"
            "2\n1\nrue-de-moscou 1\n"
            "3\n1\nrue-de-rome 1\n"
        )

    def test_empty_plan(self):
        assert encode_to_string(SignalPlan()) == "0\n"

    def test_writes_to_sink(self, loop_text):
        sink = io.StringIO()
        encode(_plan_for(loop_text), sink)
        assert sink.getvalue().startswith("3\n")

    def test_unallocated_plan_rejected(self, loop_simulation):
        plan = group_by_intersection(loop_simulation, {"rue-de-londres": 1})
        with pytest.raises(ValueError, match="no green time"):
            encode_to_string(plan)

    def test_stable_output(self):
        """Insertion order of the plan does not change the bytes."""
        forward = SignalPlan(intersections={
            1: {"a": IntersectionItem(weight=1, green_time=1),
                "b": IntersectionItem(weight=9, green_time=3)},
            0: {"c": IntersectionItem(weight=1, green_time=1)},
        })
        backward = SignalPlan(intersections={
            0: {"c": IntersectionItem(weight=1, green_time=1)},
            1: {"b": IntersectionItem(weight=9, green_time=3),
                "a": IntersectionItem(weight=1, green_time=1)},
        })
        assert encode_to_string(forward) == encode_to_string(backward)


class TestRoundTrip:
    """Encoded plans read back to the same associations."""

    def test_round_trip(self, cross_text):
        plan = _plan_for(cross_text)
        text = encode_to_string(plan)
        assert decode_plan(io.StringIO(text)) == plan.green_times()

    def test_round_trip_with_differentiated_times(self):
        plan = SignalPlan(intersections={
            7: {"north": IntersectionItem(weight=10, green_time=1),
                "south": IntersectionItem(weight=95, green_time=3)},
        })
        assert decode_plan(io.StringIO(encode_to_string(plan))) == {
            7: {"north": 1, "south": 3}
        }


class TestWritePlan:
    """Tests for writing plan files."""

    def test_writes_file(self, tmp_path, loop_text):
        path = tmp_path / "plan.txt"
        write_plan(_plan_for(loop_text), path)
        assert path.read_text() == encode_to_string(_plan_for(loop_text))

    def test_missing_directory(self, tmp_path, loop_text):
        with pytest.raises(OSError):
            write_plan(_plan_for(loop_text), tmp_path / "missing" / "plan.txt")

    def test_no_file_when_rendering_fails(self, tmp_path, loop_simulation):
        path = tmp_path / "plan.txt"
        plan = group_by_intersection(loop_simulation, {"rue-de-londres": 1})
        with pytest.raises(ValueError):
            write_plan(plan, path)
        assert not path.exists()
