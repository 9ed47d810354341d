"""End-to-end checks of generated occupancy strings."""

import random

import pytest

from fleetgen.core.generator import generate_map
from fleetgen.core.models import Coord, GenerationStatus, ShipShape
from fleetgen.core.validation import occupancy_from_string, validate_occupancy


def _touching(a: Coord, b: Coord) -> bool:
    return a != b and abs(a.row - b.row) <= 1 and abs(a.col - b.col) <= 1


def test_single_destroyer_on_3x3_is_one_adjacent_pair() -> None:
    for seed in range(50):
        result = generate_map(3, 3, {2: 1}, rng=random.Random(seed))
        assert result.layout is not None
        occupied = occupancy_from_string(result.layout.to_string(), 3, 3)
        cells = sorted(occupied, key=lambda c: (c.row, c.col))
        assert len(cells) == 2
        first, second = cells
        assert abs(first.row - second.row) + abs(first.col - second.col) == 1


def test_nine_singles_on_3x3_cannot_avoid_touching() -> None:
    result = generate_map(3, 3, {1: 9}, rng=random.Random(0))
    assert result.status is GenerationStatus.INFEASIBLE


def test_four_singles_on_3x3_take_the_corners() -> None:
    result = generate_map(3, 3, {1: 4}, rng=random.Random(0))
    assert result.layout is not None
    assert result.layout.to_string() == "#.#...#.#"


@pytest.mark.parametrize("shape", [ShipShape.STRAIGHT, ShipShape.FREEFORM])
def test_generated_ships_never_touch(shape: ShipShape) -> None:
    fleet = {3: 2, 2: 2, 1: 3}
    rng = random.Random(2024)
    for _ in range(20):
        result = generate_map(8, 8, fleet, rng=rng, shape=shape)
        assert result.layout is not None
        layout = result.layout
        for i, ship in enumerate(layout.ships):
            for other in layout.ships[i + 1 :]:
                assert not any(_touching(a, b) for a in ship for b in other)
        valid, reason = validate_occupancy(
            occupancy_from_string(layout.to_string(), 8, 8),
            8,
            8,
            fleet,
            straight=shape is ShipShape.STRAIGHT,
        )
        assert valid, reason
