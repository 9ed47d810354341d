from __future__ import annotations

import logging
import random

import pytest

from fleetgen.core.board import Board
from fleetgen.core.models import Coord
from fleetgen.infra.logging import shutdown_logging


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def board_3x3() -> Board:
    return Board(3, 3)


@pytest.fixture
def center() -> Coord:
    return Coord(1, 1)


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        shutdown_logging()
        root.handlers.clear()
        root.handlers.extend(original_handlers)
        root.setLevel(original_level)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in (
        "FLEETGEN_HEIGHT",
        "FLEETGEN_WIDTH",
        "FLEETGEN_FLEET",
        "FLEETGEN_SHIP_SHAPE",
        "FLEETGEN_SEED",
        "FLEETGEN_LOG_DIR",
        "FLEETGEN_LOG_LEVEL",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
