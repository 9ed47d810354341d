"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections.abc import Sequence

from fleetgen.core.errors import FleetConfigError
from fleetgen.core.generator import IMPOSSIBLE_MAP_MESSAGE, generate_map
from fleetgen.core.models import ShipShape
from fleetgen.infra.config import (
    format_fleet_spec,
    load_default_env_files,
    load_generator_settings,
    parse_fleet_spec,
)
from fleetgen.infra.logging import build_logging_config, configure_logging, shutdown_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fleetgen",
        description="Generate a random non-touching ship layout.",
    )
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument(
        "--fleet",
        default=None,
        help='Ship lengths and counts, e.g. "4:1,3:2,2:3,1:4".',
    )
    parser.add_argument(
        "--shape",
        choices=[shape.value for shape in ShipShape],
        default=None,
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--rows", action="store_true", help="Print one grid row per line.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Generate one layout and print it."""
    load_default_env_files()
    configure_logging(build_logging_config())
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_generator_settings()
        fleet = (
            parse_fleet_spec(args.fleet)
            if args.fleet is not None
            else settings.ship_length_counts
        )
        height = args.height if args.height is not None else settings.height
        width = args.width if args.width is not None else settings.width
        shape = ShipShape(args.shape) if args.shape is not None else settings.shape
        seed = args.seed if args.seed is not None else settings.seed
        logger.debug(
            "cli_settings height=%d width=%d fleet=%s shape=%s",
            height,
            width,
            format_fleet_spec(fleet),
            shape.value,
        )
        result = generate_map(height, width, fleet, rng=random.Random(seed), shape=shape)
    except FleetConfigError as exc:
        shutdown_logging()
        parser.error(str(exc))

    try:
        if result.layout is None:
            logger.info("map_infeasible reason=%s", result.reason)
            print(IMPOSSIBLE_MAP_MESSAGE)
            return 1
        if args.rows:
            print("\n".join(result.layout.rows()))
        else:
            print(result.layout.to_string())
        return 0
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
