"""Half-cylinder track meshes and exact collision geometry.

Both the straight primitive and the swept track are produced by the same
routine: a list of :class:`RingFrame` cross-sections is computed up front,
then :func:`triangulate_rings` lays out ``subdivisions + 1`` vertices per
ring and stitches neighbouring rings with quads.
"""

import logging
import math
from typing import Iterable, Optional

import numpy as np

from .models import (
    HalfCylinder, HalfCylinderPath, RingFrame, MeshBuffers,
    CollisionGeometry, PrimitiveTopology, InvalidConfigurationError,
    _subdivisions,
)
from .paths import WormPath
from .vecmath import WORLD_UP, vec3, normalize_or_zero, quat_rotate, rotate_about_axis

logger = logging.getLogger(__name__)


# ── Ring strategies ──────────────────────────────────────────────────────

def lateral(forward, radius: float) -> np.ndarray:
    """Radius-scaled right vector for a ring facing *forward*.

    Zero when *forward* is parallel to world up.
    """
    return normalize_or_zero(np.cross(WORLD_UP, -forward)) * radius


def straight_rings(start, end, radius: float) -> list:
    """Two rings, at *start* and *end*, sharing one forward direction."""
    start, end = vec3(start), vec3(end)
    forward = normalize_or_zero(end - start)
    right = lateral(forward, radius)
    return [RingFrame(start, forward, right), RingFrame(end, forward, right)]


def swept_rings(config: HalfCylinderPath, path: Optional[Iterable] = None) -> list:
    """One ring per turning step, ``config.n_segments + 1`` in total.

    Each step rotates the running forward direction; the ring is placed at
    the current position and the position then advances one segment along
    the new forward direction.
    """
    if path is None:
        path = WormPath.from_config(config)
    path = iter(path)

    position = vec3(config.start)
    forward = normalize_or_zero(vec3(config.forward))
    rings = []
    for k in range(config.ring_count):
        try:
            step = next(path)
        except StopIteration:
            raise InvalidConfigurationError(
                f"path ran out after {k} steps, {config.ring_count} needed")
        forward = quat_rotate(step, forward)
        rings.append(RingFrame(position.copy(), forward, lateral(forward, config.radius)))
        position = position + forward * config.segment_length
    return rings


# ── Triangulation ────────────────────────────────────────────────────────

def ring_indices(n_rings: int, subdivisions: int) -> np.ndarray:
    """Flat uint32 triangle list stitching consecutive rings.

    Vertex ``i`` of ring ``k`` has id ``k * (subdivisions + 1) + i``. Each
    quad between rings ``k`` and ``k + 1`` at column ``j`` becomes
    ``(o+1, o, o+s)`` and ``(o+s, o+s+1, o+1)`` with ``s`` the ring size and
    ``o`` the id of vertex ``j`` on ring ``k``. Viewed from the side the
    normals point to, these are counter-clockwise.
    """
    s = subdivisions + 1
    indices = []
    for k in range(max(n_rings - 1, 0)):
        for j in range(subdivisions):
            o = k * s + j
            indices.extend([
                o + 1, o, o + s,
                o + s, o + s + 1, o + 1,
            ])
    return np.array(indices, dtype=np.uint32)


def triangulate_rings(rings: list, subdivisions: int) -> MeshBuffers:
    """Build half-cylinder buffers from ring descriptors.

    Each ring sweeps its right vector half a turn (0 to pi) about its
    forward axis. Normals are the negated, normalized offsets, i.e. they
    point from the wall back toward the tube axis (the riding surface).
    """
    subdivisions = _subdivisions(subdivisions)
    s = subdivisions + 1
    vertex_count = s * len(rings)

    positions = np.empty((vertex_count, 3), dtype=np.float64)
    normals = np.empty((vertex_count, 3), dtype=np.float64)
    uvs = np.zeros((vertex_count, 2), dtype=np.float32)

    for k, ring in enumerate(rings):
        for i in range(s):
            offset = rotate_about_axis(ring.right, ring.forward,
                                       math.pi * i / subdivisions)
            positions[k * s + i] = ring.position + offset
            normals[k * s + i] = normalize_or_zero(-offset)

    indices = ring_indices(len(rings), subdivisions)
    mesh = MeshBuffers(
        positions=positions.astype(np.float32),
        normals=normals.astype(np.float32),
        uvs=uvs,
        indices=indices,
        topology=PrimitiveTopology.TRIANGLE_LIST,
    )
    logger.debug(f"Triangulated {len(rings)} rings: {mesh.vertex_count} vertices, "
                 f"{mesh.triangle_count} triangles")
    return mesh


# ── Public builders ──────────────────────────────────────────────────────

def half_cylinder(shape: Optional[HalfCylinder] = None) -> MeshBuffers:
    """Straight half-cylinder primitive."""
    shape = shape or HalfCylinder()
    rings = straight_rings(shape.start, shape.end, shape.radius)
    return triangulate_rings(rings, shape.subdivisions)


def half_cylinder_path(config: Optional[HalfCylinderPath] = None,
                       path: Optional[Iterable] = None) -> MeshBuffers:
    """Half-cylinder swept along a random walk.

    Parameters
    ----------
    config : HalfCylinderPath, optional
        Track parameters. Defaults to the standard level layout.
    path : iterable of quaternions, optional
        Turning steps to follow. Defaults to a :class:`WormPath` seeded
        from ``config``; at least ``config.n_segments + 1`` steps must be
        available.
    """
    config = config or HalfCylinderPath()
    rings = swept_rings(config, path)
    mesh = triangulate_rings(rings, config.subdivisions)
    logger.info(f"Built track (seed={config.seed}, segments={config.n_segments}): "
                f"{mesh.vertex_count} vertices, {mesh.triangle_count} triangles")
    return mesh


# ── Collision geometry ──────────────────────────────────────────────────

def mesh_to_collision_geometry(mesh) -> Optional[CollisionGeometry]:
    """Copy a triangle mesh into exact collider geometry.

    Returns ``None`` when the mesh cannot be represented as a triangle
    mesh collider: missing or non-(N, 3)-float positions, missing or
    non-flat integer indices, a topology other than a triangle list, or
    indices pointing past the last vertex. A trailing partial triangle is
    dropped with a warning. Positions keep their dtype and values.
    """
    positions = getattr(mesh, 'positions', None)
    if positions is None:
        logger.warning("Cannot build collider: mesh has no positions")
        return None
    positions = np.asarray(positions)
    if positions.ndim != 2 or positions.shape[1] != 3 \
            or not np.issubdtype(positions.dtype, np.floating):
        logger.warning(f"Cannot build collider: positions must be (N, 3) floats, "
                       f"got {positions.shape} {positions.dtype}")
        return None

    topology = getattr(mesh, 'topology', PrimitiveTopology.TRIANGLE_LIST)
    if topology != PrimitiveTopology.TRIANGLE_LIST:
        logger.warning(f"Cannot build collider: unsupported topology {topology}")
        return None

    indices = getattr(mesh, 'indices', None)
    if indices is None:
        logger.warning("Cannot build collider: mesh has no index buffer")
        return None
    indices = np.asarray(indices)
    if indices.ndim != 1 or not np.issubdtype(indices.dtype, np.integer):
        logger.warning(f"Cannot build collider: indices must be a flat integer "
                       f"triangle list, got {indices.shape} {indices.dtype}")
        return None

    n_triangles = len(indices) // 3
    if len(indices) % 3:
        logger.warning(f"Dropping {len(indices) % 3} trailing index(es) "
                       f"that do not form a whole triangle")
    triangles = indices[:n_triangles * 3].reshape(n_triangles, 3)

    if n_triangles and (triangles.min() < 0 or triangles.max() >= len(positions)):
        logger.warning(f"Cannot build collider: indices out of range for "
                       f"{len(positions)} vertices")
        return None

    return CollisionGeometry(
        vertices=positions.copy(),
        triangles=triangles.astype(np.uint32),
    )
