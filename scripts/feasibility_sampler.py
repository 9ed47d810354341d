from __future__ import annotations

import argparse
import random
from time import perf_counter

from fleetgen.core.generator import generate_map
from fleetgen.core.models import ShipShape
from fleetgen.core.validation import validate_layout
from fleetgen.infra.config import format_fleet_spec, parse_fleet_spec


def _sample(
    *,
    height: int,
    width: int,
    fleet: dict[int, int],
    shape: ShipShape,
    runs: int,
    seed: int,
) -> tuple[int, int, int, float]:
    rng = random.Random(seed)
    infeasible = 0
    invalid = 0
    retries = 0
    start = perf_counter()
    for _ in range(runs):
        result = generate_map(height, width, fleet, rng=rng, shape=shape)
        retries += result.stats.ship_retries
        if result.layout is None:
            infeasible += 1
            continue
        valid, _ = validate_layout(result.layout, fleet)
        if not valid:
            invalid += 1
    elapsed = perf_counter() - start
    return infeasible, invalid, retries, (elapsed * 1000.0) / max(1, runs)


def main() -> int:
    parser = argparse.ArgumentParser(description="Layout generation feasibility sampler.")
    parser.add_argument("--height", type=int, default=10)
    parser.add_argument("--width", type=int, default=10)
    parser.add_argument("--fleet", default="4:1,3:2,2:3,1:4")
    parser.add_argument("--shape", choices=[shape.value for shape in ShipShape], default="straight")
    parser.add_argument("--runs", type=int, default=1_000)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    fleet = parse_fleet_spec(args.fleet)
    infeasible, invalid, retries, ms_per_run = _sample(
        height=args.height,
        width=args.width,
        fleet=fleet,
        shape=ShipShape(args.shape),
        runs=args.runs,
        seed=args.seed,
    )

    print(f"board={args.height}x{args.width}")
    print(f"fleet={format_fleet_spec(fleet)}")
    print(f"runs={args.runs}")
    print(f"infeasible={infeasible}")
    print(f"invalid={invalid}")
    print(f"ship_retries={retries}")
    print(f"ms_per_run={ms_per_run:.6f}")
    return 1 if invalid else 0


if __name__ == "__main__":
    raise SystemExit(main())
