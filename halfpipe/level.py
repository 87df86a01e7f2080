"""Level setup: the swept track mesh together with its collider."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .models import HalfCylinderPath, MeshBuffers, CollisionGeometry
from .shapes import half_cylinder_path, mesh_to_collision_geometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Level:
    mesh: MeshBuffers
    collider: CollisionGeometry
    config: HalfCylinderPath


def build_level(config: Optional[HalfCylinderPath] = None) -> Level:
    """Generate the track and its exact collider.

    A track without a collider cannot be ridden, so a failed conversion
    raises instead of returning a partial level.
    """
    config = config or HalfCylinderPath()
    t0 = time.perf_counter()
    mesh = half_cylinder_path(config)
    collider = mesh_to_collision_geometry(mesh)
    if collider is None:
        raise RuntimeError("Failed to convert half cylinder mesh to collider")
    logger.info(f"Level ready in {time.perf_counter() - t0:.2f}s: "
                f"{collider.triangle_count} collider triangles")
    return Level(mesh=mesh, collider=collider, config=config)
