import logging
import random

import pytest

from fleetgen.core.errors import FleetConfigError
from fleetgen.core.generator import (
    IMPOSSIBLE_MAP_MESSAGE,
    MapGenerator,
    capacity_shortfall,
    default_generator,
    generate_map,
    normalize_fleet,
    ship_footprint,
)
from fleetgen.core.models import GenerationStatus, ShipShape
from fleetgen.core.validation import validate_layout, validate_occupancy


def test_default_fleet_layouts_are_valid() -> None:
    fleet = {4: 1, 3: 2, 2: 3, 1: 4}
    for seed in range(15):
        result = generate_map(10, 10, fleet, rng=random.Random(seed))
        assert result.status is GenerationStatus.PLACED
        assert result.layout is not None
        valid, reason = validate_layout(result.layout, fleet)
        assert valid, reason
        valid, reason = validate_occupancy(result.layout.occupied(), 10, 10, fleet, straight=True)
        assert valid, reason
        assert result.layout.to_string().count("#") == 20


def test_ship_longer_than_board_is_infeasible_without_search() -> None:
    result = generate_map(1, 1, {2: 1})
    assert result.status is GenerationStatus.INFEASIBLE
    assert result.layout is None
    assert "does not fit" in result.reason
    assert result.stats.cells_placed == 0


def test_fleet_larger_than_board_is_infeasible() -> None:
    result = generate_map(2, 2, {1: 5})
    assert result.status is GenerationStatus.INFEASIBLE
    assert "needs 5 cells" in result.reason


def test_exhausted_search_is_infeasible() -> None:
    # A 3-ship fills one row of a 2x3 board and touches every cell of the other.
    result = generate_map(2, 3, {3: 1, 1: 1}, rng=random.Random(3))
    assert result.status is GenerationStatus.INFEASIBLE
    assert not result.placed
    assert result.stats.cells_placed > 0


def test_crowded_singles_are_infeasible_without_search() -> None:
    result = generate_map(5, 5, {1: 10})
    assert result.status is GenerationStatus.INFEASIBLE
    assert "with spacing" in result.reason
    assert result.stats.cells_placed == 0
    assert result.stats.ship_retries == 0


@pytest.mark.parametrize(
    ("length", "shape", "expected"),
    [
        (1, ShipShape.STRAIGHT, 4),
        (3, ShipShape.STRAIGHT, 8),
        (1, ShipShape.FREEFORM, 4),
        (2, ShipShape.FREEFORM, 6),
        (3, ShipShape.FREEFORM, 8),
        (4, ShipShape.FREEFORM, 9),
    ],
)
def test_ship_footprint_includes_spacing(length: int, shape: ShipShape, expected: int) -> None:
    assert ship_footprint(length, shape) == expected


def test_spacing_bound_admits_tight_fits() -> None:
    # Four singles on the corners of a 3x3 board fill the spaced grid exactly.
    assert capacity_shortfall(3, 3, {1: 4}, ShipShape.STRAIGHT) == ""
    assert capacity_shortfall(3, 3, {1: 5}, ShipShape.STRAIGHT)
    result = generate_map(3, 3, {1: 4}, rng=random.Random(1))
    assert result.layout is not None
    assert result.layout.to_string() == "#.#...#.#"


@pytest.mark.parametrize(
    ("height", "width", "fleet"),
    [
        (0, 5, {1: 1}),
        (5, -1, {1: 1}),
        (5, 5, {0: 1}),
        (5, 5, {2: -1}),
        (5, 5, {"2": 1}),
        (True, 5, {1: 1}),
    ],
)
def test_configuration_errors_raise(height, width, fleet) -> None:
    with pytest.raises(FleetConfigError):
        generate_map(height, width, fleet)


def test_unknown_shape_is_a_configuration_error() -> None:
    with pytest.raises(FleetConfigError, match="diagonal"):
        generate_map(3, 3, {1: 1}, shape="diagonal")
    with pytest.raises(FleetConfigError):
        MapGenerator(3, 3, {1: 1}, shape="diagonal")


def test_zero_counts_are_dropped() -> None:
    assert normalize_fleet({3: 0, 1: 1}) == {1: 1}
    result = generate_map(1, 1, {3: 0, 1: 1})
    assert result.layout is not None
    assert result.layout.to_string() == "#"


def test_empty_fleet_yields_empty_layout() -> None:
    result = generate_map(2, 3, {})
    assert result.layout is not None
    assert result.layout.to_string() == "......"


def test_shape_policy_changes_capacity() -> None:
    assert capacity_shortfall(2, 2, {3: 1}, ShipShape.STRAIGHT)
    assert capacity_shortfall(2, 2, {3: 1}, ShipShape.FREEFORM) == ""

    straight = generate_map(2, 2, {3: 1})
    freeform = generate_map(2, 2, {3: 1}, shape="freeform", rng=random.Random(0))
    assert straight.status is GenerationStatus.INFEASIBLE
    assert freeform.layout is not None
    assert freeform.layout.to_string().count("#") == 3


def test_map_generator_with_seed_is_repeatable() -> None:
    generator = MapGenerator(6, 6, {3: 1, 2: 2}, seed=9)
    assert generator.generate_map() == generator.generate_map()


def test_map_generator_reports_impossible_map() -> None:
    assert MapGenerator(1, 1, {2: 1}).generate_map() == IMPOSSIBLE_MAP_MESSAGE


def test_default_generator_map_string() -> None:
    text = default_generator().generate_map()
    if text != IMPOSSIBLE_MAP_MESSAGE:
        assert len(text) == 100
        assert set(text) <= {"#", "."}
        assert text.count("#") == 20


def test_outcome_is_logged_with_fields(caplog) -> None:
    caplog.set_level(logging.INFO, logger="fleetgen.core.generator")
    generate_map(4, 4, {2: 1}, rng=random.Random(5))

    records = [r for r in caplog.records if r.name == "fleetgen.core.generator"]
    assert records
    assert records[-1].status == "PLACED"
    assert records[-1].ships == 1
