"""Data classes, error types, and path management."""

import logging
import math
import pathlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
import trimesh

from .constants import (
    OUTPUT_DIR, FORWARD, MAX_SEED,
    HALF_CYLINDER_START, HALF_CYLINDER_END, HALF_CYLINDER_RADIUS,
    DEFAULT_SUBDIVISIONS,
    TRACK_START, TRACK_RADIUS, TRACK_SEGMENT_LENGTH, TRACK_SEGMENTS,
    TRACK_SEED, TRACK_YAW_RANGE, TRACK_PITCH_RANGE,
)

logger = logging.getLogger(__name__)


class HalfpipeError(Exception):
    """Base class for errors raised by the halfpipe package."""


class InvalidConfigurationError(HalfpipeError, ValueError):
    """A shape or path was configured with values it cannot be built from."""


class PrimitiveTopology(Enum):
    POINT_LIST = "point_list"
    LINE_LIST = "line_list"
    LINE_STRIP = "line_strip"
    TRIANGLE_LIST = "triangle_list"
    TRIANGLE_STRIP = "triangle_strip"


class PathManager:
    """Manage paths relative to the halfpipe output directory."""

    @staticmethod
    def get_output_path(filename: str) -> pathlib.Path:
        """Get the output file path. Absolute paths are returned unchanged."""
        return OUTPUT_DIR / filename


# ── Validation helpers ───────────────────────────────────────────────────

def _vec3(name: str, value) -> tuple:
    try:
        vec = tuple(float(c) for c in value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a 3-component vector, got {value!r}")
    if len(vec) != 3 or not all(math.isfinite(c) for c in vec):
        raise InvalidConfigurationError(f"{name} must be a finite 3-component vector, got {value!r}")
    return vec


def _angle_range(name: str, value) -> tuple:
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a (low, high) pair, got {value!r}")
    if not (math.isfinite(low) and math.isfinite(high)):
        raise InvalidConfigurationError(f"{name} bounds must be finite, got {value!r}")
    if not low < high:
        raise InvalidConfigurationError(
            f"{name} must be a non-empty interval (low < high), got [{low}, {high})")
    return low, high


def _integer(name: str, value, minimum: int = 0, maximum: Optional[int] = None) -> int:
    try:
        number = int(value)
        whole = not isinstance(value, bool) and number == value
    except (TypeError, ValueError, OverflowError):
        whole = False
    if not whole:
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    if number < minimum or (maximum is not None and number >= maximum):
        bound = f"in [{minimum}, {maximum})" if maximum is not None else f">= {minimum}"
        raise InvalidConfigurationError(f"{name} must be {bound}, got {value!r}")
    return number


def _positive(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
    if not (math.isfinite(number) and number > 0):
        raise InvalidConfigurationError(f"{name} must be > 0, got {value!r}")
    return number


def _subdivisions(value) -> int:
    # The arc step is pi / subdivisions
    return _integer('subdivisions', value, minimum=1)


def _radius(value) -> float:
    return _positive('radius', value)


def _seed(value) -> int:
    return _integer('seed', value, maximum=MAX_SEED)


# ── Shape configurations ─────────────────────────────────────────────────

@dataclass(frozen=True)
class HalfCylinder:
    """Straight half-cylinder running from ``start`` to ``end``."""
    start: tuple = HALF_CYLINDER_START
    end: tuple = HALF_CYLINDER_END
    radius: float = HALF_CYLINDER_RADIUS
    subdivisions: int = DEFAULT_SUBDIVISIONS

    def __post_init__(self):
        object.__setattr__(self, 'start', _vec3('start', self.start))
        object.__setattr__(self, 'end', _vec3('end', self.end))
        object.__setattr__(self, 'radius', _radius(self.radius))
        object.__setattr__(self, 'subdivisions', _subdivisions(self.subdivisions))

    @classmethod
    def from_scale(cls, scale: float) -> "HalfCylinder":
        """Default primitive uniformly scaled."""
        return cls(
            start=tuple(c * scale for c in HALF_CYLINDER_START),
            end=tuple(c * scale for c in HALF_CYLINDER_END),
            radius=HALF_CYLINDER_RADIUS * scale,
        )

    @classmethod
    def from_radius_and_length(cls, radius: float, length: float) -> "HalfCylinder":
        """Primitive centred on the origin along Z with the given size."""
        return cls(
            start=tuple(c * length for c in HALF_CYLINDER_START),
            end=tuple(c * length for c in HALF_CYLINDER_END),
            radius=radius,
        )


@dataclass(frozen=True)
class HalfCylinderPath:
    """Half-cylinder swept along a seeded random walk.

    ``yaw_range`` and ``pitch_range`` are half-open ``[low, high)``
    intervals in radians. The walk takes ``n_segments + 1`` turning
    steps, one per ring.
    """
    start: tuple = TRACK_START
    forward: tuple = FORWARD
    radius: float = TRACK_RADIUS
    segment_length: float = TRACK_SEGMENT_LENGTH
    n_segments: int = TRACK_SEGMENTS
    subdivisions: int = DEFAULT_SUBDIVISIONS
    seed: int = TRACK_SEED
    yaw_range: tuple = TRACK_YAW_RANGE
    pitch_range: tuple = TRACK_PITCH_RANGE

    def __post_init__(self):
        object.__setattr__(self, 'start', _vec3('start', self.start))
        forward = _vec3('forward', self.forward)
        if not any(forward):
            raise InvalidConfigurationError("forward must have nonzero length")
        object.__setattr__(self, 'forward', forward)
        object.__setattr__(self, 'radius', _radius(self.radius))
        object.__setattr__(self, 'subdivisions', _subdivisions(self.subdivisions))

        object.__setattr__(self, 'segment_length',
                           _positive('segment_length', self.segment_length))
        object.__setattr__(self, 'n_segments', _integer('n_segments', self.n_segments))
        object.__setattr__(self, 'seed', _seed(self.seed))

        object.__setattr__(self, 'yaw_range', _angle_range('yaw_range', self.yaw_range))
        object.__setattr__(self, 'pitch_range', _angle_range('pitch_range', self.pitch_range))

    @property
    def ring_count(self) -> int:
        return self.n_segments + 1

    @property
    def vertex_count(self) -> int:
        return (self.subdivisions + 1) * self.ring_count


@dataclass(frozen=True, eq=False)
class RingFrame:
    """One cross-section: centre, sweep direction, and radius-scaled lateral."""
    position: np.ndarray
    forward: np.ndarray
    right: np.ndarray


# ── Mesh buffers ─────────────────────────────────────────────────────────

def _frozen_array(value):
    if value is None:
        return None
    arr = np.array(value, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class MeshBuffers:
    """Parallel vertex attributes plus a flat triangle index list.

    ``positions`` and ``normals`` are (N, 3) float32, ``uvs`` is (N, 2)
    float32 and ``indices`` is a flat uint32 array, three per triangle.
    All arrays are copied and made read-only on construction.
    """
    positions: Optional[np.ndarray]
    normals: Optional[np.ndarray] = None
    uvs: Optional[np.ndarray] = None
    indices: Optional[np.ndarray] = None
    topology: PrimitiveTopology = PrimitiveTopology.TRIANGLE_LIST

    def __post_init__(self):
        for name in ('positions', 'normals', 'uvs', 'indices'):
            object.__setattr__(self, name, _frozen_array(getattr(self, name)))

    @property
    def vertex_count(self) -> int:
        return 0 if self.positions is None else len(self.positions)

    @property
    def triangle_count(self) -> int:
        return 0 if self.indices is None else len(self.indices) // 3

    @property
    def faces(self) -> np.ndarray:
        """Indices reshaped to (M, 3); a trailing partial triangle is dropped."""
        if self.indices is None:
            return np.empty((0, 3), dtype=np.uint32)
        n = self.triangle_count
        return self.indices[:n * 3].reshape(n, 3)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Wrap the buffers in an unprocessed ``trimesh.Trimesh``.

        Vertices are not merged and normals are kept as generated, so the
        result is index-for-index identical to the buffers.
        """
        if self.positions is None or self.indices is None:
            raise HalfpipeError("mesh needs both positions and indices to build a Trimesh")
        return trimesh.Trimesh(
            vertices=np.asarray(self.positions, dtype=np.float64),
            faces=self.faces,
            vertex_normals=self.normals,
            process=False,
        )

    def export(self, output_path: str, file_type: Optional[str] = None) -> str:
        """Write the mesh with trimesh. Returns the absolute output path."""
        output_path = PathManager.get_output_path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.to_trimesh().export(str(output_path), file_type=file_type)
        size_kb = output_path.stat().st_size / 1024
        logger.info(f"Exported {self.triangle_count} triangles to {output_path} "
                    f"({size_kb:.1f} KB)")
        return str(output_path.resolve())


@dataclass(frozen=True, eq=False)
class CollisionGeometry:
    """Exact triangle-mesh collider: vertex list plus index triples."""
    vertices: np.ndarray
    triangles: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=np.uint32))

    def __post_init__(self):
        object.__setattr__(self, 'vertices', _frozen_array(self.vertices))
        object.__setattr__(self, 'triangles', _frozen_array(self.triangles))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(
            vertices=np.asarray(self.vertices, dtype=np.float64),
            faces=self.triangles,
            process=False,
        )
