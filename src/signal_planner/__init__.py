"""
Traffic Signal Green-Time Planner

Turns a road network and a recorded set of car routes into a static
green-time plan per intersection.
"""

__version__ = "0.1.0"

from .allocator import allocate, compute_green_times, resolve_max_green_time
from .decoder import decode, decode_file, decode_plan, decode_text
from .demand import (
    compute_street_weights,
    compute_street_weights_normalized,
    filter_car_paths,
)
from .encoder import encode, encode_to_string, write_plan
from .exceptions import ParseError, PlannerError, UnknownStreetError
from .models import (
    DemandOptions,
    IntersectionItem,
    PlanResult,
    SignalPlan,
    Simulation,
    Street,
)
from .pipeline import process_file, run_batch

__all__ = [
    "__version__",
    "allocate",
    "compute_green_times",
    "resolve_max_green_time",
    "decode",
    "decode_file",
    "decode_plan",
    "decode_text",
    "compute_street_weights",
    "compute_street_weights_normalized",
    "filter_car_paths",
    "encode",
    "encode_to_string",
    "write_plan",
    "ParseError",
    "PlannerError",
    "UnknownStreetError",
    "DemandOptions",
    "IntersectionItem",
    "PlanResult",
    "SignalPlan",
    "Simulation",
    "Street",
    "process_file",
    "run_batch",
]
