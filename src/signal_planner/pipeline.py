"""
Batch driver.

Runs decode -> aggregate -> allocate -> encode for each input file on a
bounded worker pool. Every task owns its simulation, plan and files;
failures are logged and reported per file and never stop sibling tasks.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from os import PathLike
from pathlib import Path
from typing import Optional, Union

from .allocator import allocate, resolve_max_green_time
from .decoder import decode_file
from .demand import compute_street_weights
from .encoder import write_plan
from .exceptions import ParseError
from .models import DemandOptions, PlanResult

PathType = Union[str, PathLike]


class TaskLogger(logging.LoggerAdapter):
    """Prefixes every message with the input file of the task."""

    def process(self, msg, kwargs):
        return f"{self.extra['input']} | {msg}", kwargs


def output_path_for(input_path: PathType, output_dir: PathType) -> Path:
    """Plan file location: the input's base name inside output_dir."""
    return Path(output_dir) / Path(input_path).name


def process_file(
    input_path: PathType,
    output_dir: PathType,
    options: Optional[DemandOptions] = None,
    max_green_time: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> PlanResult:
    """
    Plan a single input file and write the result to output_dir.

    The plan file is only written once allocation has succeeded. Any
    failure is logged with the input's name and returned as a failed
    PlanResult instead of being raised.

    Args:
        input_path: Simulation file to read
        output_dir: Existing directory receiving the plan file
        options: Demand aggregation knobs
        max_green_time: Optional cap below the simulation duration
        logger: Parent logger for the task (module logger by default)

    Returns:
        PlanResult describing the outcome
    """
    parent = logger or logging.getLogger(__name__)
    log = TaskLogger(parent, {"input": str(input_path)})
    output_path = output_path_for(input_path, output_dir)

    def failed(message: str) -> PlanResult:
        return PlanResult(input_path=str(input_path), success=False, error=message)

    try:
        simulation = decode_file(input_path)
        log.debug(
            "Parsed simulation | duration=%d streets=%d cars=%d",
            simulation.duration,
            len(simulation.streets),
            len(simulation.car_paths),
        )

        weights = compute_street_weights(simulation, options)
        cap = resolve_max_green_time(simulation, max_green_time)
        plan = allocate(simulation, weights, cap)
        write_plan(plan, output_path)

    except ParseError as e:
        log.error("Failed to parse %s: %s", input_path, e)
        return failed(f"parse error: {e}")
    except OSError as e:
        log.error("I/O error on %s: %s", e.filename or input_path, e.strerror or e)
        return failed(f"I/O error: {e}")
    except ValueError as e:
        log.error("Invalid planning parameters: %s", e)
        return failed(f"invalid parameters: {e}")
    except Exception as e:
        log.exception("Planning failed")
        return failed(f"unexpected error: {e}")

    log.info(
        "Plan written | output=%s intersections=%d",
        output_path,
        plan.intersection_count,
    )
    return PlanResult(
        input_path=str(input_path),
        output_path=str(output_path),
        success=True,
        intersection_count=plan.intersection_count,
    )


def run_batch(
    input_paths: Iterable[PathType],
    output_dir: PathType,
    options: Optional[DemandOptions] = None,
    max_green_time: Optional[int] = None,
    max_workers: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> list[PlanResult]:
    """
    Plan every input file concurrently and wait for all of them.

    Args:
        input_paths: Simulation files, one task each
        output_dir: Existing directory receiving the plan files
        options: Demand aggregation knobs shared by all tasks
        max_green_time: Optional cap below each simulation's duration
        max_workers: Worker pool size (executor default when None)
        logger: Parent logger for the batch and its tasks

    Returns:
        One PlanResult per input, in input order
    """
    log = logger or logging.getLogger(__name__)
    paths = list(input_paths)

    log.info(
        "Planning batch | files=%d output_dir=%s workers=%s",
        len(paths),
        output_dir,
        max_workers,
    )

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(
                process_file, path, output_dir, options, max_green_time, log
            )
            for path in paths
        ]
        results = [future.result() for future in futures]

    failures = sum(1 for result in results if not result.success)
    log.info(
        "Batch complete | succeeded=%d failed=%d",
        len(results) - failures,
        failures,
    )
    return results
