"""
Plan endpoint.

Runs the green-time planner on a simulation posted as text.
No file output - the plan is returned in the response.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, ConfigDict

from src.signal_planner import (
    DemandOptions,
    ParseError,
    allocate,
    compute_street_weights,
    decode_text,
    encode_to_string,
    resolve_max_green_time,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---

class PlanRequest(BaseModel):
    """
    Request body for green-time planning.

    ``simulation`` holds the whole input file: header, streets and
    car paths as whitespace-separated tokens.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "simulation": (
                    "6 3 3 2 0\n"
                    "0 1 rue-de-londres 1\n"
                    "1 2 rue-d-amsterdam 1\n"
                    "2 0 rue-d-athenes 1\n"
                    "3 rue-de-londres rue-d-amsterdam rue-d-athenes\n"
                    "2 rue-d-amsterdam rue-d-athenes\n"
                ),
                "max_green_time": 6,
                "normalize_by_traversal_time": False,
                "drop_worst_percent": 0
            }
        }
    )

    simulation: str = Field(
        ...,
        min_length=1,
        description="Simulation in the planner's text input format"
    )
    max_green_time: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap on any green time (defaults to the simulation duration)"
    )
    normalize_by_traversal_time: bool = Field(
        default=False,
        description="Divide street demand by traversal time"
    )
    drop_worst_percent: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Percent of least-slack routes ignored when aggregating"
    )


class StreetGreenTime(BaseModel):
    """Allocation for one incoming street."""

    name: str = Field(description="Street name")
    weight: float = Field(description="Aggregated demand")
    green_time: int = Field(description="Green time in seconds")


class IntersectionPlan(BaseModel):
    """Allocation for one intersection."""

    id: int = Field(description="Intersection id")
    streets: list[StreetGreenTime] = Field(description="Incoming streets by name")


class PlanResponse(BaseModel):
    """Computed signal plan."""

    intersection_count: int = Field(description="Intersections in the plan")
    intersections: list[IntersectionPlan] = Field(
        description="Intersections by ascending id"
    )
    plan_text: str = Field(description="Plan in the text output format")


@router.post(
    "/plan",
    response_model=PlanResponse,
    summary="Compute a green-time plan",
)
async def compute_plan(request: PlanRequest) -> PlanResponse:
    """
    Decode the simulation, aggregate street demand and allocate green
    times per intersection.
    """
    options = DemandOptions(
        normalize_by_traversal_time=request.normalize_by_traversal_time,
        drop_worst_percent=request.drop_worst_percent,
    )

    try:
        simulation = decode_text(request.simulation)

        logger.info(
            "Planning | streets=%d cars=%d duration=%d",
            len(simulation.streets),
            len(simulation.car_paths),
            simulation.duration,
        )

        weights = compute_street_weights(simulation, options)
        max_green_time = resolve_max_green_time(simulation, request.max_green_time)
        plan = allocate(simulation, weights, max_green_time)

        logger.info("Planning complete | intersections=%d", plan.intersection_count)

        return PlanResponse(
            intersection_count=plan.intersection_count,
            intersections=[
                IntersectionPlan(
                    id=intersection_id,
                    streets=[
                        StreetGreenTime(
                            name=name,
                            weight=item.weight,
                            green_time=item.green_time,
                        )
                        for name, item in sorted(plan.intersections[intersection_id].items())
                    ],
                )
                for intersection_id in sorted(plan.intersections)
            ],
            plan_text=encode_to_string(plan),
        )

    except ParseError as e:
        logger.error("Parse error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "parse_error",
                "message": str(e),
                "section": e.section,
                "index": e.index,
            },
        )
    except ValueError as e:
        logger.error("Validation error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "message": str(e)},
        )
    except Exception as e:
        logger.exception("Planning error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "planning_error", "message": str(e)},
        )
