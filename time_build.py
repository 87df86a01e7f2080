"""Time track generation and collider extraction at increasing sizes."""

import logging
import time
import sys
import os

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(__file__))

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

from halfpipe.models import HalfCylinderPath
from halfpipe.shapes import half_cylinder_path, mesh_to_collision_geometry


def timed_build(n_segments: int, subdivisions: int):
    config = HalfCylinderPath(n_segments=n_segments, subdivisions=subdivisions)
    timings = {}

    t0 = time.perf_counter()
    mesh = half_cylinder_path(config)
    timings["1. Mesh generation"] = time.perf_counter() - t0

    t0 = time.perf_counter()
    collider = mesh_to_collision_geometry(mesh)
    timings["2. Collider extraction"] = time.perf_counter() - t0
    if collider is None:
        raise RuntimeError("Failed to convert half cylinder mesh to collider")

    print("\n" + "=" * 60)
    print(f"BUILD COMPLETE: {n_segments} segments x {subdivisions} subdivisions "
          f"({mesh.triangle_count} triangles)")
    print("=" * 60)
    total = 0
    for label, dur in timings.items():
        print(f"  {label}: {dur * 1000:.1f}ms")
        total += dur
    print(f"  TOTAL: {total * 1000:.1f}ms")
    print("=" * 60)


if __name__ == "__main__":
    for segments in (10, 100, 1000):
        timed_build(segments, 10)
    if "--fine" in sys.argv:
        timed_build(1000, 64)
