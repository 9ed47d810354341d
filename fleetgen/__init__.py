"""Random non-touching ship layout generator."""

from fleetgen.core.generator import MapGenerator, default_generator, generate_map
from fleetgen.core.models import GenerationResult, GenerationStatus, Layout, ShipShape

__all__ = [
    "GenerationResult",
    "GenerationStatus",
    "Layout",
    "MapGenerator",
    "ShipShape",
    "default_generator",
    "generate_map",
]
