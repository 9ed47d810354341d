"""Board state with incremental neighbor counts and a placeable-cell pool."""

from __future__ import annotations

import numpy as np

from fleetgen.core.candidates import CandidateSet
from fleetgen.core.errors import BoardStateError
from fleetgen.core.models import FREE_CHAR, OCCUPIED_CHAR, Coord

_ORTHOGONAL_STEPS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
_ALL_STEPS: tuple[tuple[int, int], ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


class Board:
    """Numpy-backed grid state.

    ``neighbor_counts[r, c]`` always equals the number of occupied cells in the
    8-neighborhood of ``(r, c)``. A cell is placeable iff it is free and that
    count is zero; the placeable pool is kept in sync on every mutation.
    """

    def __init__(self, height: int, width: int) -> None:
        if height <= 0 or width <= 0:
            raise ValueError(f"Board dimensions must be positive, got {height}x{width}.")
        self.height = height
        self.width = width
        self.occupied = np.zeros((height, width), dtype=np.bool_)
        self.neighbor_counts = np.zeros((height, width), dtype=np.int16)
        self._cells = [[Coord(row, col) for col in range(width)] for row in range(height)]
        self._placeable = CandidateSet(height, width, (cell for row in self._cells for cell in row))

    def in_bounds(self, row: int, col: int) -> bool:
        """Return whether the coordinate is in board bounds."""
        return 0 <= row < self.height and 0 <= col < self.width

    def is_occupied(self, cell: Coord) -> bool:
        return bool(self.occupied[cell.row, cell.col])

    def neighbor_count(self, cell: Coord) -> int:
        return int(self.neighbor_counts[cell.row, cell.col])

    def is_placeable(self, cell: Coord) -> bool:
        return self._placeable.contains(cell)

    def set_occupied(self, cell: Coord) -> None:
        """Occupy a cell and withdraw it and its neighbors from the placeable pool."""
        if self.occupied[cell.row, cell.col]:
            raise BoardStateError(f"Cell {cell} is already occupied.")
        self.occupied[cell.row, cell.col] = True
        for neighbor in self.all_neighbors(cell):
            self.neighbor_counts[neighbor.row, neighbor.col] += 1
            self._placeable.remove(neighbor)
        self._placeable.remove(cell)

    def set_free(self, cell: Coord) -> None:
        """Free a cell, returning any cell left without occupied neighbors to the pool."""
        if not self.occupied[cell.row, cell.col]:
            raise BoardStateError(f"Cell {cell} is not occupied.")
        self.occupied[cell.row, cell.col] = False
        for neighbor in self.all_neighbors(cell):
            self.neighbor_counts[neighbor.row, neighbor.col] -= 1
            if (
                self.neighbor_counts[neighbor.row, neighbor.col] == 0
                and not self.occupied[neighbor.row, neighbor.col]
            ):
                self._placeable.insert(neighbor)
        if self.neighbor_counts[cell.row, cell.col] == 0:
            self._placeable.insert(cell)

    def free_cells_snapshot(self) -> CandidateSet:
        """Return a copy of the placeable pool as it stands now."""
        return self._placeable.snapshot()

    def placeable_count(self) -> int:
        return len(self._placeable)

    def check_consistency(self) -> None:
        """Raise if the placeable pool disagrees with occupancy and neighbor counts."""
        self._placeable.check_consistency()
        expected = ~self.occupied & (self.neighbor_counts == 0)
        for row in range(self.height):
            for col in range(self.width):
                cell = self._cells[row][col]
                if bool(expected[row, col]) != self._placeable.contains(cell):
                    raise BoardStateError(f"Cell {cell} has a stale placeable flag.")

    def adjacent_neighbors(self, cell: Coord) -> list[Coord]:
        """Return in-bounds orthogonal neighbors."""
        return self._neighbors(cell, _ORTHOGONAL_STEPS)

    def all_neighbors(self, cell: Coord) -> list[Coord]:
        """Return in-bounds orthogonal and diagonal neighbors."""
        return self._neighbors(cell, _ALL_STEPS)

    def to_string(self) -> str:
        """Render the flat row-major occupancy string."""
        return "".join(
            OCCUPIED_CHAR if value else FREE_CHAR for value in self.occupied.ravel().tolist()
        )

    def _neighbors(self, cell: Coord, steps: tuple[tuple[int, int], ...]) -> list[Coord]:
        result: list[Coord] = []
        for dr, dc in steps:
            row = cell.row + dr
            col = cell.col + dc
            if self.in_bounds(row, col):
                result.append(self._cells[row][col])
        return result
