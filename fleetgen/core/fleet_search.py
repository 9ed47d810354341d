"""Outer backtracking search that sequences ship placements."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from fleetgen.core.board import Board
from fleetgen.core.models import Coord, SearchStats, ShipShape
from fleetgen.core.ship_search import ShipSearch

logger = logging.getLogger(__name__)


class FleetSearch:
    """Place ships in the given order, retracting earlier ships on dead ends."""

    def __init__(
        self,
        board: Board,
        sizes: Sequence[int],
        rng: random.Random,
        *,
        shape: ShipShape = ShipShape.STRAIGHT,
        stats: SearchStats | None = None,
    ) -> None:
        self.board = board
        self.sizes = tuple(sizes)
        self.shape = shape
        self.stats = stats if stats is not None else SearchStats()
        self._rng = rng
        self._placed: list[ShipSearch] = []

    def search(self) -> bool:
        """Run until every ship is placed or the first ship runs out of options."""
        if not self.sizes:
            return True
        working = self._new_ship(0)
        while len(self._placed) != len(self.sizes):
            if working.search():
                self._placed.append(working)
                if len(self._placed) < len(self.sizes):
                    working = self._new_ship(len(self._placed))
                continue
            if not self._placed:
                logger.debug("fleet_search_exhausted size=%d", working.length)
                return False
            working = self._placed.pop()
            self.stats.ship_retries += 1
            logger.debug(
                "fleet_search_retract index=%d size=%d",
                len(self._placed),
                working.length,
            )
        if logger.isEnabledFor(logging.DEBUG):
            self.board.check_consistency()
        return True

    def ships(self) -> list[tuple[Coord, ...]]:
        """Return committed cells of every placed ship in placement order."""
        return [tuple(ship.cells) for ship in self._placed]

    def _new_ship(self, index: int) -> ShipSearch:
        return ShipSearch(
            self.board,
            self.sizes[index],
            self._rng,
            shape=self.shape,
            stats=self.stats,
        )
