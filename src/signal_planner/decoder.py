"""
Decoding of the textual simulation format.

Input is a stream of whitespace-separated tokens (line breaks are
conventional only):

    duration intersections streets cars bonus
    begin end name traversal_time          (one per street)
    path_length name_1 ... name_n          (one per car)

The plan reader at the bottom parses the encoder's output format back,
which is what the round-trip checks rely on.
"""

import io
import re
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, UnknownStreetError
from .models import CarPath, Simulation, Street

# Plain decimal integers only: no digit separators, no non-ASCII digits.
_INTEGER = re.compile(r"[+-]?[0-9]+")


class _Header(BaseModel):
    """First record of a simulation file."""

    duration: int = Field(..., gt=0)
    intersection_count: int = Field(..., ge=0)
    street_count: int = Field(..., ge=0)
    car_count: int = Field(..., ge=0)
    bonus: int = Field(..., ge=0)


def _describe(exc: Exception) -> str:
    """One-line description of a scan or validation failure."""
    if isinstance(exc, PydanticValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
    return str(exc)


class _TokenReader:
    """Pulls whitespace-separated tokens from a text or binary stream."""

    def __init__(self, stream: Iterable[Union[str, bytes]]):
        self._tokens = self._split(stream)

    @staticmethod
    def _split(stream: Iterable[Union[str, bytes]]) -> Iterator[str]:
        for line in stream:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            yield from line.split()

    def next_token(self) -> str:
        try:
            return next(self._tokens)
        except StopIteration:
            raise EOFError("unexpected end of input") from None

    def next_int(self) -> int:
        token = self.next_token()
        if not _INTEGER.fullmatch(token):
            raise ValueError(f"expected an integer, got {token!r}")
        return int(token)


def decode(stream: Iterable[Union[str, bytes]]) -> Simulation:
    """
    Decode a simulation from a readable stream.

    Car paths are checked against the street table while decoding, so a
    path naming an unknown street fails here rather than later during
    aggregation.

    Args:
        stream: Text or binary stream (any iterable of lines)

    Returns:
        The decoded Simulation

    Raises:
        ParseError: On malformed, truncated or inconsistent input
        UnknownStreetError: If a car path names a street not in the network
    """
    reader = _TokenReader(stream)

    try:
        values = [reader.next_int() for _ in range(5)]
        header = _Header(
            duration=values[0],
            intersection_count=values[1],
            street_count=values[2],
            car_count=values[3],
            bonus=values[4],
        )
    except (EOFError, ValueError) as exc:
        raise ParseError("header", reason=_describe(exc)) from exc

    streets: dict[str, Street] = {}
    for i in range(header.street_count):
        try:
            street = Street(
                begin=reader.next_int(),
                end=reader.next_int(),
                name=reader.next_token(),
                traversal_time=reader.next_int(),
            )
        except (EOFError, ValueError) as exc:
            raise ParseError("street", i, _describe(exc)) from exc

        if street.name in streets:
            raise ParseError("street", i, f"duplicate street name {street.name!r}")
        streets[street.name] = street

    car_paths: list[CarPath] = []
    for i in range(header.car_count):
        try:
            path_length = reader.next_int()
            if path_length < 0:
                raise ValueError(f"negative path length {path_length}")
            path = tuple(reader.next_token() for _ in range(path_length))
        except (EOFError, ValueError) as exc:
            raise ParseError("car", i, _describe(exc)) from exc

        for name in path:
            if name not in streets:
                raise UnknownStreetError(name, i)
        car_paths.append(path)

    return Simulation(
        duration=header.duration,
        intersection_count=header.intersection_count,
        streets=streets,
        car_paths=car_paths,
        bonus=header.bonus,
    )


def decode_text(text: str) -> Simulation:
    """Decode a simulation held in a string."""
    return decode(io.StringIO(text))


def decode_file(path: Union[str, PathLike]) -> Simulation:
    """
    Read a simulation file in full and decode it.

    The file is read as bytes so that invalid UTF-8 is reported as a
    ParseError for the record it appears in.

    Raises:
        OSError: If the file cannot be read
        ParseError: On malformed input
    """
    return decode(io.BytesIO(Path(path).read_bytes()))


def decode_plan(stream: Iterable[Union[str, bytes]]) -> dict[int, dict[str, int]]:
    """
    Read a signal plan written by the encoder.

    Returns:
        {intersection id: {street name: green time}}

    Raises:
        ParseError: On malformed or truncated plan text
    """
    reader = _TokenReader(stream)

    try:
        count = reader.next_int()
        if count < 0:
            raise ValueError(f"negative intersection count {count}")
    except (EOFError, ValueError) as exc:
        raise ParseError("plan-header", reason=_describe(exc)) from exc

    plan: dict[int, dict[str, int]] = {}
    for i in range(count):
        try:
            intersection_id = reader.next_int()
            street_count = reader.next_int()
            if street_count < 0:
                raise ValueError(f"negative street count {street_count}")
            green_times = {}
            for _ in range(street_count):
                name = reader.next_token()
                green_times[name] = reader.next_int()
        except (EOFError, ValueError) as exc:
            raise ParseError("intersection", i, _describe(exc)) from exc

        if intersection_id in plan:
            raise ParseError(
                "intersection", i, f"duplicate intersection id {intersection_id}"
            )
        plan[intersection_id] = green_times

    return plan
