"""Resumable backtracking search that grows a single ship cell by cell."""

from __future__ import annotations

import random
from dataclasses import dataclass

from fleetgen.core.board import Board
from fleetgen.core.candidates import CandidateSet
from fleetgen.core.errors import BoardStateError
from fleetgen.core.models import Coord, SearchStats, ShipShape


@dataclass(slots=True)
class _Level:
    """Frontier computed on first visit plus the cell currently committed from it."""

    frontier: CandidateSet
    chosen: Coord | None = None


class ShipSearch:
    """Grow one ship of a fixed length on a board.

    The first call to ``search`` snapshots the board's placeable cells and
    searches from scratch. Later calls resume in retry mode: the last committed
    cell is withdrawn and the search continues from that level's remaining
    frontier, so the caller can ask for the next alternative placement.
    """

    def __init__(
        self,
        board: Board,
        length: int,
        rng: random.Random,
        *,
        shape: ShipShape = ShipShape.STRAIGHT,
        stats: SearchStats | None = None,
    ) -> None:
        if length <= 0:
            raise ValueError(f"Ship length must be positive, got {length}.")
        self.board = board
        self.length = length
        self.shape = shape
        self.cells: list[Coord] = []
        self._rng = rng
        self._stats = stats if stats is not None else SearchStats()
        self._free_cells: CandidateSet | None = None
        self._levels: list[_Level] = []

    @property
    def complete(self) -> bool:
        return len(self.cells) == self.length

    def search(self) -> bool:
        """Place the ship, or the next alternative when resuming. Return success."""
        working: _Level | None
        if self._free_cells is None:
            self._free_cells = self.board.free_cells_snapshot()
            working = None
        elif self._levels:
            working = self._levels.pop()
        else:
            return False

        while len(self._levels) != self.length:
            if working is None:
                working = _Level(frontier=self._build_frontier())
            else:
                self._withdraw(working)

            if working.frontier:
                self._commit(working)
                self._levels.append(working)
                working = None
            elif not self._levels:
                return False
            else:
                working = self._levels.pop()
                self._stats.cell_backtracks += 1
        return True

    def _build_frontier(self) -> CandidateSet:
        free_cells = self._require_free_cells()
        if not self.cells:
            return free_cells.snapshot()

        frontier = CandidateSet(self.board.height, self.board.width)
        for placed in self.cells:
            for neighbor in self.board.adjacent_neighbors(placed):
                if free_cells.contains(neighbor) and self._keeps_shape(neighbor):
                    frontier.insert(neighbor)
        return frontier

    def _keeps_shape(self, cell: Coord) -> bool:
        if self.shape is ShipShape.FREEFORM or len(self.cells) < 2:
            return True
        first, second = self.cells[0], self.cells[1]
        if first.row == second.row:
            return cell.row == first.row
        return cell.col == first.col

    def _commit(self, level: _Level) -> None:
        free_cells = self._require_free_cells()
        cell = level.frontier.pop_random(self._rng)
        self.board.set_occupied(cell)
        free_cells.remove(cell)
        self.cells.append(cell)
        level.chosen = cell
        self._stats.cells_placed += 1

    def _withdraw(self, level: _Level) -> None:
        free_cells = self._require_free_cells()
        if level.chosen is None or not self.cells:
            raise BoardStateError("Ship search has no committed cell to withdraw.")
        cell = self.cells.pop()
        if cell != level.chosen:
            raise BoardStateError(f"Ship search withdrew {cell}, expected {level.chosen}.")
        self.board.set_free(cell)
        free_cells.insert(cell)
        level.chosen = None

    def _require_free_cells(self) -> CandidateSet:
        if self._free_cells is None:
            raise BoardStateError("Ship search has not taken its free-cell snapshot yet.")
        return self._free_cells
