"""
Street demand aggregation.

A street's weight is the number of times the recorded car paths go
through it. Two optional variants are exposed through DemandOptions:
normalizing the count by the street's traversal time, and discarding
the routes least likely to finish before counting.
"""

import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Optional

from .models import CarPath, DemandOptions, Simulation

logger = logging.getLogger(__name__)


def compute_deadline(sim: Simulation, path: CarPath) -> int:
    """
    Travel time a car needs to complete its path.

    The first street is skipped: the car starts at its end, waiting at
    the first light.
    """
    return sum(sim.streets[name].traversal_time for name in path[1:])


def count_street_traversals(car_paths: Iterable[CarPath]) -> dict[str, float]:
    """
    Count how many times each street is used across all car paths.

    A street visited twice by the same car counts twice.
    """
    counts = Counter(name for path in car_paths for name in path)
    return {name: float(count) for name, count in counts.items()}


def filter_car_paths(sim: Simulation, drop_percent: float) -> list[CarPath]:
    """
    Drop the given percentage of routes with the least slack.

    Routes are ordered by ``duration - deadline`` ascending (stable for
    ties) and the first ``floor(len * drop_percent / 100)`` are removed:
    those are the cars that finish last or not at all.

    Args:
        sim: Source simulation (left untouched)
        drop_percent: Percentage of routes to discard, 0-100

    Returns:
        New list holding the kept routes

    Raises:
        ValueError: If drop_percent is outside 0-100
    """
    if not 0 <= drop_percent <= 100:
        raise ValueError("drop_percent must be between 0 and 100")

    ranked = sorted(
        sim.car_paths,
        key=lambda path: sim.duration - compute_deadline(sim, path)
    )
    to_remove = math.floor(len(ranked) * drop_percent / 100)

    logger.debug(
        "Removing least-slack routes | removed=%d cars=%d",
        to_remove,
        len(ranked),
    )
    return ranked[to_remove:]


def compute_street_weights_normalized(
    sim: Simulation,
    car_paths: Optional[Iterable[CarPath]] = None
) -> dict[str, float]:
    """
    Traversal count of each street divided by its traversal time.

    Models demand density per second of street rather than raw volume.

    Args:
        sim: Simulation providing the street table
        car_paths: Routes to aggregate (defaults to all of sim.car_paths)
    """
    paths = sim.car_paths if car_paths is None else car_paths
    counts = count_street_traversals(paths)
    return {
        name: count / sim.streets[name].traversal_time
        for name, count in counts.items()
    }


def compute_street_weights(
    sim: Simulation,
    options: Optional[DemandOptions] = None
) -> dict[str, float]:
    """
    Compute the demand weight of every used street.

    With default options this is the plain traversal count. Streets that
    no car uses are absent from the result (weight 0).

    Args:
        sim: Decoded simulation
        options: Aggregation knobs (normalization, route filter)

    Returns:
        Mapping of street name to weight
    """
    options = options or DemandOptions()

    car_paths: Sequence[CarPath] = sim.car_paths
    if options.drop_worst_percent > 0:
        car_paths = filter_car_paths(sim, options.drop_worst_percent)

    if options.normalize_by_traversal_time:
        return compute_street_weights_normalized(sim, car_paths)
    return count_street_traversals(car_paths)
