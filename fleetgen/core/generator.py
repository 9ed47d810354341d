"""Public layout generation entry points."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Mapping

from fleetgen.core.board import Board
from fleetgen.core.errors import FleetConfigError
from fleetgen.core.fleet_search import FleetSearch
from fleetgen.core.models import (
    DEFAULT_HEIGHT,
    DEFAULT_SHIP_LENGTH_COUNTS,
    DEFAULT_WIDTH,
    GenerationResult,
    GenerationStatus,
    Layout,
    SearchStats,
    ShipShape,
    ship_sizes,
)

logger = logging.getLogger(__name__)

IMPOSSIBLE_MAP_MESSAGE = "It's impossible to generate such a map."


def normalize_fleet(ship_length_counts: Mapping[int, int]) -> dict[int, int]:
    """Validate a length->count mapping and drop zero counts."""
    normalized: dict[int, int] = {}
    for length, count in ship_length_counts.items():
        if isinstance(length, bool) or not isinstance(length, int):
            raise FleetConfigError(f"Ship length must be an integer, got {length!r}.")
        if isinstance(count, bool) or not isinstance(count, int):
            raise FleetConfigError(f"Ship count must be an integer, got {count!r}.")
        if length <= 0:
            raise FleetConfigError(f"Ship length must be positive, got {length}.")
        if count < 0:
            raise FleetConfigError(f"Ship count for length {length} must not be negative.")
        if count:
            normalized[length] = count
    return normalized


def validate_dimensions(height: int, width: int) -> None:
    """Raise if the grid dimensions are not positive integers."""
    for name, value in (("height", height), ("width", width)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise FleetConfigError(f"Board {name} must be an integer, got {value!r}.")
        if value <= 0:
            raise FleetConfigError(f"Board {name} must be positive, got {value}.")


def coerce_shape(shape: ShipShape | str) -> ShipShape:
    """Return the shape policy named by ``shape``."""
    try:
        return ShipShape(shape)
    except ValueError as exc:
        raise FleetConfigError(f"Unknown ship shape {shape!r}.") from exc


def ship_footprint(length: int, shape: ShipShape) -> int:
    """Return the fewest cells a ship covers once grown by one cell right and down.

    Grown footprints of non-touching ships are disjoint and all fit on a
    ``(height + 1) x (width + 1)`` grid. A ship spanning ``h`` rows and ``w``
    columns covers at least ``length + h + w + 1`` cells, and ``h * w >= length``.
    """
    if shape is ShipShape.STRAIGHT:
        return 2 * (length + 1)
    # Smallest h + w with h * w >= length is ceil(2 * sqrt(length)).
    return length + (math.isqrt(4 * length - 1) + 1) + 1


def capacity_shortfall(
    height: int, width: int, ship_length_counts: Mapping[int, int], shape: ShipShape
) -> str:
    """Return why the fleet cannot fit at all, or an empty string."""
    if not ship_length_counts:
        return ""
    longest = max(ship_length_counts)
    limit = max(height, width) if shape is ShipShape.STRAIGHT else height * width
    if longest > limit:
        return f"Ship of length {longest} does not fit on a {height}x{width} board."
    total = sum(length * count for length, count in ship_length_counts.items())
    if total > height * width:
        return f"Fleet needs {total} cells but the board has {height * width}."
    spaced = sum(
        ship_footprint(length, shape) * count for length, count in ship_length_counts.items()
    )
    if spaced > (height + 1) * (width + 1):
        return (
            f"Fleet needs {spaced} cells with spacing but a {height}x{width} board "
            f"holds {(height + 1) * (width + 1)}."
        )
    return ""


def generate_map(
    height: int,
    width: int,
    ship_length_counts: Mapping[int, int],
    *,
    rng: random.Random | None = None,
    shape: ShipShape | str = ShipShape.STRAIGHT,
) -> GenerationResult:
    """Place the fleet on a fresh board with no two ships touching."""
    validate_dimensions(height, width)
    fleet = normalize_fleet(ship_length_counts)
    ship_shape = coerce_shape(shape)
    stats = SearchStats()

    shortfall = capacity_shortfall(height, width, fleet, ship_shape)
    if shortfall:
        _log_outcome(height, width, fleet, GenerationStatus.INFEASIBLE, stats)
        return GenerationResult(status=GenerationStatus.INFEASIBLE, reason=shortfall, stats=stats)

    board = Board(height, width)
    search = FleetSearch(
        board,
        ship_sizes(fleet),
        rng if rng is not None else random.Random(),
        shape=ship_shape,
        stats=stats,
    )
    if not search.search():
        _log_outcome(height, width, fleet, GenerationStatus.INFEASIBLE, stats)
        return GenerationResult(
            status=GenerationStatus.INFEASIBLE,
            reason="No non-touching placement exists for this fleet.",
            stats=stats,
        )

    layout = Layout(height=height, width=width, ships=tuple(search.ships()))
    _log_outcome(height, width, fleet, GenerationStatus.PLACED, stats)
    return GenerationResult(status=GenerationStatus.PLACED, layout=layout, stats=stats)


class MapGenerator:
    """Generator bound to one board size, fleet and shape policy."""

    def __init__(
        self,
        height: int,
        width: int,
        ship_length_counts: Mapping[int, int],
        *,
        shape: ShipShape | str = ShipShape.STRAIGHT,
        seed: int | None = None,
    ) -> None:
        validate_dimensions(height, width)
        self.height = height
        self.width = width
        self.ship_length_counts = normalize_fleet(ship_length_counts)
        self.shape = coerce_shape(shape)
        self.seed = seed

    def generate(self) -> GenerationResult:
        """Run one generation with a fresh board and random source."""
        return generate_map(
            self.height,
            self.width,
            self.ship_length_counts,
            rng=random.Random(self.seed),
            shape=self.shape,
        )

    def generate_map(self) -> str:
        """Return the occupancy string, or a message when no layout exists."""
        result = self.generate()
        if result.layout is None:
            return IMPOSSIBLE_MAP_MESSAGE
        return result.layout.to_string()


def default_generator() -> MapGenerator:
    """Return a generator for the classic 10x10 fleet."""
    return MapGenerator(DEFAULT_HEIGHT, DEFAULT_WIDTH, DEFAULT_SHIP_LENGTH_COUNTS)


def _log_outcome(
    height: int,
    width: int,
    fleet: Mapping[int, int],
    status: GenerationStatus,
    stats: SearchStats,
) -> None:
    logger.info(
        "map_generation status=%s",
        status.value,
        extra={
            "height": height,
            "width": width,
            "ships": sum(fleet.values()),
            "status": status.value,
            "cells_placed": stats.cells_placed,
            "cell_backtracks": stats.cell_backtracks,
            "ship_retries": stats.ship_retries,
        },
    )
