"""Vector and quaternion helpers.

Quaternions are numpy arrays in ``(w, x, y, z)`` order, matching
``trimesh.transformations``.
"""

import numpy as np
from trimesh import transformations as tf

from .constants import UP

WORLD_UP = np.array(UP, dtype=np.float64)
WORLD_RIGHT = np.array([1.0, 0.0, 0.0])


def vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=np.float64).reshape(3)


def normalize_or_zero(v) -> np.ndarray:
    """Unit vector along *v*, or the zero vector when *v* has no direction."""
    v = np.asarray(v, dtype=np.float64)
    length = np.linalg.norm(v)
    if not np.isfinite(length) or length <= 0.0:
        return np.zeros_like(v)
    return v / length


def quat_from_axis_angle(axis, angle: float) -> np.ndarray:
    return tf.quaternion_about_axis(angle, axis)


def quat_from_rotation_y(angle: float) -> np.ndarray:
    return tf.quaternion_about_axis(angle, WORLD_UP)


def quat_from_rotation_x(angle: float) -> np.ndarray:
    return tf.quaternion_about_axis(angle, WORLD_RIGHT)


def quat_mul(q1, q0) -> np.ndarray:
    """Hamilton product ``q1 * q0``: rotates by *q0* first, then *q1*."""
    return tf.quaternion_multiply(q1, q0)


def quat_rotate(q, v) -> np.ndarray:
    """Rotate vector *v* by quaternion *q*."""
    return tf.quaternion_matrix(q)[:3, :3] @ vec3(v)


def rotate_about_axis(v, axis, angle: float) -> np.ndarray:
    """Rotate *v* about *axis* by *angle* radians.

    A zero axis leaves *v* unchanged instead of producing NaN.
    """
    return quat_rotate(quat_from_axis_angle(axis, angle), v)


def triangle_normals(positions, faces) -> np.ndarray:
    """Unnormalized face normals from CCW winding, one per face."""
    tri = np.asarray(positions, dtype=np.float64)[np.asarray(faces, dtype=np.int64)]
    return np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
