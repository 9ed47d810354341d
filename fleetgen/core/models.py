"""Core domain models used by the layout generator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

DEFAULT_HEIGHT = 10
DEFAULT_WIDTH = 10
DEFAULT_SHIP_LENGTH_COUNTS: dict[int, int] = {4: 1, 3: 2, 2: 3, 1: 4}

OCCUPIED_CHAR = "#"
FREE_CHAR = "."


class ShipShape(StrEnum):
    """Shape policy applied while a ship grows."""

    STRAIGHT = "straight"
    FREEFORM = "freeform"


class GenerationStatus(StrEnum):
    """Outcome of one generation run."""

    PLACED = "PLACED"
    INFEASIBLE = "INFEASIBLE"


@dataclass(frozen=True, slots=True)
class Coord:
    """Grid coordinate."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class Layout:
    """Static board layout produced by a successful run."""

    height: int
    width: int
    ships: tuple[tuple[Coord, ...], ...]

    def occupied(self) -> frozenset[Coord]:
        """Return every occupied coordinate."""
        return frozenset(cell for ship in self.ships for cell in ship)

    def rows(self) -> list[str]:
        """Render one string per grid row."""
        occupied = self.occupied()
        return [
            "".join(
                OCCUPIED_CHAR if Coord(row, col) in occupied else FREE_CHAR
                for col in range(self.width)
            )
            for row in range(self.height)
        ]

    def to_string(self) -> str:
        """Render the flat row-major occupancy string."""
        return "".join(self.rows())

    def __str__(self) -> str:
        return self.to_string()


@dataclass(slots=True)
class SearchStats:
    """Counters collected while searching."""

    cells_placed: int = 0
    cell_backtracks: int = 0
    ship_retries: int = 0


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Result of a generation run: a layout or an infeasibility report."""

    status: GenerationStatus
    layout: Layout | None = None
    reason: str = ""
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def placed(self) -> bool:
        return self.status is GenerationStatus.PLACED


def ship_sizes(ship_length_counts: Mapping[int, int]) -> list[int]:
    """Expand a length->count mapping into sizes ordered largest first."""
    sizes: list[int] = []
    for length in sorted(ship_length_counts, reverse=True):
        sizes.extend([length] * ship_length_counts[length])
    return sizes
