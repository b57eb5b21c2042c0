"""
Green-time allocation.

Streets are grouped under the intersection they lead into, then each
intersection independently turns the relative demand of its incoming
streets into green times:

    threshold  = 3 * lowest weight at the intersection
    green_time = clamp(floor(weight / threshold), 1, max_green_time)

The factor of 3 is a smoothing floor: streets only get more than the
minimum once their demand exceeds three times the quietest street.
"""

import math
from collections.abc import Mapping
from typing import Optional

from .models import Intersection, IntersectionItem, Simulation, SignalPlan


SMOOTHING_FACTOR = 3
MIN_GREEN_TIME = 1


def group_by_intersection(
    sim: Simulation,
    weights: Mapping[str, float]
) -> SignalPlan:
    """
    Place every street with nonzero weight under its destination.

    Weights for names outside the network are ignored.

    Returns:
        SignalPlan whose items carry weights only (green times unset)
    """
    plan = SignalPlan()

    for name, street in sim.streets.items():
        weight = weights.get(name, 0)
        if weight == 0:
            continue

        intersection = plan.intersections.setdefault(street.end, {})
        intersection[name] = IntersectionItem(weight=weight)

    return plan


def compute_green_times(intersection: Intersection, max_green_time: int) -> None:
    """
    Set the green time of every item of one intersection, in place.

    Args:
        intersection: Incoming streets of the intersection
        max_green_time: Upper bound for any single green time

    Raises:
        ValueError: If max_green_time is below the minimum green time
    """
    if max_green_time < MIN_GREEN_TIME:
        raise ValueError(f"max_green_time must be at least {MIN_GREEN_TIME}")
    if not intersection:
        return

    lowest = min(item.weight for item in intersection.values())
    threshold = lowest * SMOOTHING_FACTOR

    for item in intersection.values():
        if threshold == 0:
            item.green_time = MIN_GREEN_TIME
            continue

        share = math.floor(item.weight / threshold)
        item.green_time = min(max(share, MIN_GREEN_TIME), max_green_time)


def resolve_max_green_time(sim: Simulation, cap: Optional[int] = None) -> int:
    """
    Maximum green time for a simulation.

    The simulation duration, lowered to ``cap`` when an operator cap is
    given.

    Raises:
        ValueError: If cap is below the minimum green time
    """
    if cap is None:
        return sim.duration
    if cap < MIN_GREEN_TIME:
        raise ValueError(f"max green time cap must be at least {MIN_GREEN_TIME}")
    return min(sim.duration, cap)


def allocate(
    sim: Simulation,
    weights: Mapping[str, float],
    max_green_time: int
) -> SignalPlan:
    """
    Build the signal plan for a simulation.

    Intersections do not interact: each one is computed from its own
    incoming streets only, and equal weights get equal green times.

    Args:
        sim: Decoded simulation
        weights: Street demand, as returned by compute_street_weights
        max_green_time: Upper bound for any single green time

    Returns:
        SignalPlan with every green time set

    Raises:
        ValueError: If max_green_time is below the minimum green time
    """
    if max_green_time < MIN_GREEN_TIME:
        raise ValueError(f"max_green_time must be at least {MIN_GREEN_TIME}")

    plan = group_by_intersection(sim, weights)
    for intersection in plan.intersections.values():
        compute_green_times(intersection, max_green_time)

    return plan
