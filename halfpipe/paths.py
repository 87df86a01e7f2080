"""Seeded random-walk orientation steps for swept tracks."""

import itertools
import logging

import numpy as np

from .constants import TRACK_SEED, TRACK_YAW_RANGE, TRACK_PITCH_RANGE
from .models import _angle_range, _seed
from .vecmath import quat_from_rotation_x, quat_from_rotation_y, quat_mul

logger = logging.getLogger(__name__)


class WormPath:
    """Infinite iterator of turning steps for a worm-like random walk.

    Each step yaws about world up, then pitches about the yawed lateral
    axis, and is returned as a ``(w, x, y, z)`` quaternion. The generator
    owns its own PCG64 state, so two instances with the same seed and
    ranges yield bit-identical sequences. It cannot be rewound; use
    :meth:`reseeded` to start over.
    """

    def __init__(self, seed: int = TRACK_SEED,
                 yaw_range: tuple = TRACK_YAW_RANGE,
                 pitch_range: tuple = TRACK_PITCH_RANGE):
        self.seed = _seed(seed)
        self.yaw_range = _angle_range('yaw_range', yaw_range)
        self.pitch_range = _angle_range('pitch_range', pitch_range)
        self._rng = np.random.Generator(np.random.PCG64(self.seed))
        self.steps_taken = 0
        logger.debug(f"Seeded {self!r}")

    @classmethod
    def from_config(cls, config) -> "WormPath":
        return cls(config.seed, config.yaw_range, config.pitch_range)

    def __iter__(self):
        return self

    def __next__(self) -> np.ndarray:
        yaw = self._rng.uniform(*self.yaw_range)
        pitch = self._rng.uniform(*self.pitch_range)
        self.steps_taken += 1
        return quat_mul(quat_from_rotation_y(yaw), quat_from_rotation_x(pitch))

    def take(self, n: int) -> list:
        """Pull the next *n* steps."""
        return list(itertools.islice(self, n))

    def reseeded(self, seed: int = None) -> "WormPath":
        """Fresh walk with the same ranges, from *seed* or the original seed."""
        return WormPath(self.seed if seed is None else seed,
                        self.yaw_range, self.pitch_range)

    def __repr__(self):
        return (f"WormPath(seed={self.seed}, yaw_range={self.yaw_range}, "
                f"pitch_range={self.pitch_range}, steps_taken={self.steps_taken})")
