"""Generator configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from fleetgen.core.errors import FleetConfigError
from fleetgen.core.models import (
    DEFAULT_HEIGHT,
    DEFAULT_SHIP_LENGTH_COUNTS,
    DEFAULT_WIDTH,
    ShipShape,
)

DEFAULT_ENV_FILES: tuple[str, ...] = (".env.fleetgen", ".env.fleetgen.local")


@dataclass(frozen=True, slots=True)
class GeneratorSettings:
    """Immutable generator configuration."""

    height: int = DEFAULT_HEIGHT
    width: int = DEFAULT_WIDTH
    ship_length_counts: dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_SHIP_LENGTH_COUNTS)
    )
    shape: ShipShape = ShipShape.STRAIGHT
    seed: int | None = None


def load_env_file(path: str = ".env.fleetgen", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files left-to-right; later files win on conflicting keys."""
    to_load = tuple(paths) if paths is not None else DEFAULT_ENV_FILES
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def parse_fleet_spec(text: str) -> dict[int, int]:
    """Parse ``"4:1,3:2"`` into ``{4: 1, 3: 2}``."""
    counts: dict[int, int] = {}
    for part in text.split(","):
        item = part.strip()
        if not item:
            continue
        length_text, sep, count_text = item.partition(":")
        if not sep:
            raise FleetConfigError(f"Fleet entry {item!r} must look like LENGTH:COUNT.")
        try:
            length = int(length_text)
            count = int(count_text)
        except ValueError as exc:
            raise FleetConfigError(f"Fleet entry {item!r} must hold integers.") from exc
        if length in counts:
            raise FleetConfigError(f"Ship length {length} is listed twice.")
        counts[length] = count
    return counts


def format_fleet_spec(ship_length_counts: Mapping[int, int]) -> str:
    """Render a fleet mapping in ``LENGTH:COUNT`` form, longest ships first."""
    return ",".join(
        f"{length}:{ship_length_counts[length]}"
        for length in sorted(ship_length_counts, reverse=True)
    )


def load_generator_settings() -> GeneratorSettings:
    """Load generator settings from env vars."""
    raw_fleet = os.getenv("FLEETGEN_FLEET", "").strip()
    raw_shape = os.getenv("FLEETGEN_SHIP_SHAPE", "").strip().lower()
    try:
        shape = ShipShape(raw_shape) if raw_shape else ShipShape.STRAIGHT
    except ValueError as exc:
        raise FleetConfigError(f"Unknown ship shape {raw_shape!r}.") from exc
    return GeneratorSettings(
        height=_int("FLEETGEN_HEIGHT", DEFAULT_HEIGHT),
        width=_int("FLEETGEN_WIDTH", DEFAULT_WIDTH),
        ship_length_counts=(
            parse_fleet_spec(raw_fleet) if raw_fleet else dict(DEFAULT_SHIP_LENGTH_COUNTS)
        ),
        shape=shape,
        seed=_optional_int("FLEETGEN_SEED"),
    )


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
