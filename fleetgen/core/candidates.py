"""Cell set with O(1) membership, removal and uniform random pop."""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator

import numpy as np

from fleetgen.core.errors import CandidateSetEmptyError, CandidateSetStateError
from fleetgen.core.models import Coord


class CandidateSet:
    """Presence bitmap over the grid paired with a dense member list.

    A member's slot in ``_items`` is tracked in ``_slots`` so removal swaps the
    last member into the freed slot instead of shifting the list.
    """

    __slots__ = ("_height", "_width", "_present", "_items", "_slots")

    def __init__(self, height: int, width: int, cells: Iterable[Coord] = ()) -> None:
        self._height = height
        self._width = width
        self._present = np.zeros((height, width), dtype=np.bool_)
        self._items: list[Coord] = []
        self._slots: dict[Coord, int] = {}
        for cell in cells:
            self.insert(cell)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Coord]:
        return iter(tuple(self._items))

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, Coord) and self.contains(cell)

    def contains(self, cell: Coord) -> bool:
        """Return whether the cell is a member."""
        return bool(self._present[cell.row, cell.col])

    def insert(self, cell: Coord) -> None:
        """Add the cell unless it is already a member."""
        if self._present[cell.row, cell.col]:
            return
        self._present[cell.row, cell.col] = True
        self._slots[cell] = len(self._items)
        self._items.append(cell)

    def remove(self, cell: Coord) -> None:
        """Drop the cell if it is a member."""
        if not self._present[cell.row, cell.col]:
            return
        self._present[cell.row, cell.col] = False
        self._take(self._slots[cell])

    def pop_random(self, rng: random.Random) -> Coord:
        """Remove and return a member chosen uniformly at random."""
        if not self._items:
            raise CandidateSetEmptyError("Cannot pop from an empty candidate set.")
        cell = self._take(rng.randrange(len(self._items)))
        self._present[cell.row, cell.col] = False
        return cell

    def snapshot(self) -> CandidateSet:
        """Return an independent copy."""
        copy = CandidateSet.__new__(CandidateSet)
        copy._height = self._height
        copy._width = self._width
        copy._present = self._present.copy()
        copy._items = list(self._items)
        copy._slots = dict(self._slots)
        return copy

    def check_consistency(self) -> None:
        """Raise if the bitmap and the member list disagree."""
        if int(np.count_nonzero(self._present)) != len(self._items):
            raise CandidateSetStateError("Candidate set bitmap and member list sizes differ.")
        for index, cell in enumerate(self._items):
            if not self._present[cell.row, cell.col] or self._slots.get(cell) != index:
                raise CandidateSetStateError(f"Candidate set member {cell} is out of sync.")

    def _take(self, index: int) -> Coord:
        # Swap the chosen slot with the last one, then drop the tail.
        last = len(self._items) - 1
        cell = self._items[index]
        if index != last:
            moved = self._items[last]
            self._items[index] = moved
            self._slots[moved] = index
        self._items.pop()
        del self._slots[cell]
        return cell
