"""Layout validation against the no-touch fleet rules."""

from __future__ import annotations

from collections import Counter, deque
from collections.abc import Iterable, Mapping

from fleetgen.core.models import OCCUPIED_CHAR, Coord, Layout


def validate_layout(layout: Layout, ship_length_counts: Mapping[int, int]) -> tuple[bool, str]:
    """Validate placed ships against the fleet and the no-touch rule."""
    seen: set[Coord] = set()
    for index, ship in enumerate(layout.ships):
        for cell in ship:
            if not (0 <= cell.row < layout.height and 0 <= cell.col < layout.width):
                return False, f"Ship {index} has out-of-bounds cell ({cell.row}, {cell.col})."
            if cell in seen:
                return False, f"Cell ({cell.row}, {cell.col}) is used twice."
            seen.add(cell)
    valid, reason = validate_occupancy(seen, layout.height, layout.width, ship_length_counts)
    if not valid:
        return valid, reason

    by_component = {frozenset(component) for component in _components(seen)}
    for index, ship in enumerate(layout.ships):
        if frozenset(ship) not in by_component:
            return False, f"Ship {index} does not match a single connected run."
    return True, ""


def validate_occupancy(
    occupied: Iterable[Coord],
    height: int,
    width: int,
    ship_length_counts: Mapping[int, int],
    *,
    straight: bool = False,
) -> tuple[bool, str]:
    """Validate a bare set of occupied cells.

    Cells are grouped by 8-connectivity; each group must be one orthogonally
    connected ship so that no two ships touch, and the group sizes must match
    the configured fleet.
    """
    cells = set(occupied)
    lengths: Counter[int] = Counter()
    for component in _components(cells):
        if not _orthogonally_connected(component):
            return False, "Ships touch diagonally."
        if straight and len({c.row for c in component}) > 1 and len({c.col for c in component}) > 1:
            return False, "Ship is not a straight run."
        lengths[len(component)] += 1

    expected = Counter({length: count for length, count in ship_length_counts.items() if count})
    if lengths != expected:
        return False, f"Ship lengths {dict(sorted(lengths.items()))} do not match fleet."
    return True, ""


def occupancy_from_string(text: str, height: int, width: int) -> set[Coord]:
    """Parse a flat row-major occupancy string."""
    if len(text) != height * width:
        raise ValueError(f"Expected {height * width} characters, got {len(text)}.")
    return {
        Coord(index // width, index % width)
        for index, char in enumerate(text)
        if char == OCCUPIED_CHAR
    }


def _components(cells: set[Coord]) -> list[list[Coord]]:
    remaining = set(cells)
    result: list[list[Coord]] = []
    while remaining:
        start = remaining.pop()
        component = [start]
        queue = deque([start])
        while queue:
            cell = queue.popleft()
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    neighbor = Coord(cell.row + dr, cell.col + dc)
                    if neighbor in remaining:
                        remaining.remove(neighbor)
                        component.append(neighbor)
                        queue.append(neighbor)
        result.append(component)
    return result


def _orthogonally_connected(component: list[Coord]) -> bool:
    members = set(component)
    start = component[0]
    reached = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            neighbor = Coord(cell.row + dr, cell.col + dc)
            if neighbor in members and neighbor not in reached:
                reached.add(neighbor)
                queue.append(neighbor)
    return len(reached) == len(members)
