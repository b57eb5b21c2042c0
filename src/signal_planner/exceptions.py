"""Exceptions raised by the signal planner."""

from typing import Optional


class PlannerError(Exception):
    """Base exception for all signal planner errors."""
    pass


class ParseError(PlannerError):
    """
    Raised when simulation or plan text cannot be decoded.

    ``section`` names the part of the input that failed ("header",
    "street", "car", ...) and ``index`` the record number within it
    (None for single-record sections). The underlying failure is chained
    as ``__cause__`` when there is one.
    """

    def __init__(
        self,
        section: str,
        index: Optional[int] = None,
        reason: Optional[str] = None
    ):
        self.section = section
        self.index = index
        self.reason = reason

        where = section if index is None else f"{section} {index}"
        message = f"could not parse {where}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownStreetError(ParseError, LookupError):
    """Raised when a car path references a street missing from the network."""

    def __init__(self, street_name: str, car_index: int):
        self.street_name = street_name
        super().__init__(
            "car",
            car_index,
            f"unknown street {street_name!r}"
        )
