"""halfpipe package: procedural half-pipe track meshes and exact colliders."""

from halfpipe.models import (
    HalfCylinder, HalfCylinderPath, MeshBuffers, CollisionGeometry,
    PrimitiveTopology, HalfpipeError, InvalidConfigurationError,
)
from halfpipe.paths import WormPath
from halfpipe.shapes import half_cylinder, half_cylinder_path, mesh_to_collision_geometry
from halfpipe.level import Level, build_level
