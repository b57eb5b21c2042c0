"""
Command-line entry point.

    signal-planner [--[no-]debug] [--outdir DIR] [--workers N]
                   [--max-green-time N] [--[no-]normalize]
                   [--drop-worst-percent P] INPUT [INPUT ...]

Writes one plan per input file to ``DIR/<input base name>`` and exits
with status 1 if any input failed.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError

from app.config import Settings, settings
from src.signal_planner import DemandOptions, run_batch

logger = logging.getLogger(__name__)


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    """Argument parser whose defaults come from the settings."""
    parser = argparse.ArgumentParser(
        prog="signal-planner",
        description="Compute traffic-light green times from recorded car routes",
    )
    parser.add_argument("inputs", nargs="+", metavar="INPUT", help="Simulation files")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=defaults.debug,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--outdir",
        default=defaults.output_dir,
        help="Directory in which the output files are stored (default: %(default)s)",
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        default=defaults.max_workers,
        help="Number of files planned concurrently",
    )
    parser.add_argument(
        "--max-green-time",
        type=int,
        default=defaults.max_green_time,
        help="Cap on any green time (defaults to each simulation's duration)",
    )
    parser.add_argument(
        "--normalize",
        action=argparse.BooleanOptionalAction,
        default=defaults.normalize_by_traversal_time,
        help="Divide street demand by traversal time",
    )
    parser.add_argument(
        "--drop-worst-percent",
        type=float,
        default=defaults.drop_worst_percent,
        help="Percent of least-slack routes ignored when aggregating (0-100)",
    )
    return parser


def configure_logging(debug: bool) -> None:
    """Send debug output to stdout when enabled, warnings to stderr otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stdout if debug else sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.max_green_time is not None and args.max_green_time < 1:
        parser.error("--max-green-time must be at least 1")
    try:
        options = DemandOptions(
            normalize_by_traversal_time=args.normalize,
            drop_worst_percent=args.drop_worst_percent,
        )
    except ValidationError:
        parser.error("--drop-worst-percent must be between 0 and 100")

    configure_logging(args.debug)

    os.makedirs(args.outdir, exist_ok=True)
    logger.info("Storing the outputs in %s", args.outdir)

    results = run_batch(
        args.inputs,
        args.outdir,
        options=options,
        max_green_time=args.max_green_time,
        max_workers=args.workers,
    )

    failed = [result for result in results if not result.success]
    if failed:
        logger.warning(
            "Planning failed for %d of %d files: %s",
            len(failed),
            len(results),
            ", ".join(result.input_path for result in failed),
        )
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
