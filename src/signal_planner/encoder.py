"""
Encoding of signal plans.

Output format:

    <number of intersections>
    <intersection id>
    <number of incoming streets>
    <street name> <green time>      (one line per street)
    ...

Intersections are written by ascending id and streets by name, so the
same plan always produces the same bytes.
"""

import io
from os import PathLike
from pathlib import Path
from typing import TextIO, Union

from .models import SignalPlan


def encode(plan: SignalPlan, sink: TextIO) -> None:
    """
    Write a plan to a text sink.

    Raises:
        ValueError: If a street has no green time (plan not allocated)
        OSError: On write failure
    """
    sink.write(f"{len(plan.intersections)}\n")

    for intersection_id in sorted(plan.intersections):
        intersection = plan.intersections[intersection_id]
        sink.write(f"{intersection_id}\n{len(intersection)}\n")

        for name in sorted(intersection):
            green_time = intersection[name].green_time
            if green_time is None:
                raise ValueError(
                    f"street {name!r} at intersection {intersection_id} "
                    "has no green time"
                )
            sink.write(f"{name} {green_time}\n")


def encode_to_string(plan: SignalPlan) -> str:
    """Render a plan as text."""
    buffer = io.StringIO()
    encode(plan, buffer)
    return buffer.getvalue()


def write_plan(plan: SignalPlan, path: Union[str, PathLike]) -> None:
    """
    Write a plan file in one shot.

    The text is rendered in memory first so a rendering failure never
    leaves a file behind. The parent directory must exist.

    Raises:
        OSError: If the file cannot be created or written
    """
    text = encode_to_string(plan)
    Path(path).write_text(text, encoding="utf-8")
