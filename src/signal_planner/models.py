"""
Pydantic models for the signal planner.

Covers the parsed simulation (network + routes), the per-intersection
green-time plan produced by the allocator, and the batch driver results.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# A car route: ordered street names, the first one being the starting street.
CarPath = tuple[str, ...]


class Street(BaseModel):
    """Directed road segment between two intersections."""

    model_config = ConfigDict(frozen=True)

    begin: int = Field(
        ...,
        ge=0,
        description="Origin intersection id"
    )
    end: int = Field(
        ...,
        ge=0,
        description="Destination intersection id"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Street name, unique across the network"
    )
    traversal_time: int = Field(
        ...,
        gt=0,
        description="Seconds needed to drive from one end to the other"
    )


class Simulation(BaseModel):
    """
    Road network and recorded car routes for one input file.

    Built once by the decoder and read-only afterwards: the street table
    is a read-only mapping and routes are tuples. Every name in
    ``car_paths`` is a key of ``streets``.
    """

    model_config = ConfigDict(frozen=True)

    duration: int = Field(
        ...,
        gt=0,
        description="Total simulated time in seconds"
    )
    intersection_count: int = Field(
        ...,
        ge=0,
        description="Declared number of intersections"
    )
    streets: Mapping[str, Street] = Field(
        default_factory=dict,
        validate_default=True,
        description="Streets keyed by name"
    )
    car_paths: tuple[CarPath, ...] = Field(
        default_factory=tuple,
        description="One route per car, in input order"
    )
    bonus: int = Field(
        default=0,
        ge=0,
        description="Points per car arriving before the end (scoring only)"
    )

    @field_validator("streets")
    @classmethod
    def streets_read_only(cls, v):
        """Street table cannot be modified once the simulation is built."""
        return MappingProxyType(dict(v))


class IntersectionItem(BaseModel):
    """Demand and allocated green time for one incoming street."""

    weight: float = Field(
        ...,
        ge=0,
        description="Aggregated demand of the street"
    )
    green_time: Optional[int] = Field(
        default=None,
        ge=1,
        description="Allocated green time in seconds (unset before allocation)"
    )


# Incoming streets of one intersection, keyed by street name.
Intersection = dict[str, IntersectionItem]


class SignalPlan(BaseModel):
    """
    Green-time allocation for a whole network.

    Only intersections with at least one incoming street of nonzero
    demand are present.
    """

    intersections: dict[int, Intersection] = Field(
        default_factory=dict,
        description="Intersections keyed by id"
    )

    @property
    def intersection_count(self) -> int:
        """Number of intersections in the plan."""
        return len(self.intersections)

    def green_times(self) -> dict[int, dict[str, Optional[int]]]:
        """Plain {intersection id: {street name: green time}} view."""
        return {
            intersection_id: {
                name: item.green_time for name, item in intersection.items()
            }
            for intersection_id, intersection in self.intersections.items()
        }


class DemandOptions(BaseModel):
    """Knobs of the demand aggregation step (both disabled by default)."""

    normalize_by_traversal_time: bool = Field(
        default=False,
        description="Divide each street's traversal count by its traversal time"
    )
    drop_worst_percent: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Percent of least-slack routes discarded before aggregating"
    )


class PlanResult(BaseModel):
    """Outcome of planning a single input file."""

    input_path: str = Field(description="Input file that was processed")
    output_path: Optional[str] = Field(
        default=None,
        description="Written plan file (set on success)"
    )
    success: bool = Field(description="Whether the plan was written")
    intersection_count: int = Field(
        default=0,
        ge=0,
        description="Number of intersections in the written plan"
    )
    error: Optional[str] = Field(
        default=None,
        description="Diagnostic message when the task failed"
    )
