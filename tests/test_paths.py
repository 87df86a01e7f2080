import math

import numpy as np
import pytest

from halfpipe.models import InvalidConfigurationError
from halfpipe.paths import WormPath
from halfpipe.vecmath import quat_rotate


def test_same_seed_same_sequence():
    a = WormPath(4321).take(50)
    b = WormPath(4321).take(50)
    assert all(np.array_equal(qa, qb) for qa, qb in zip(a, b))


def test_different_seed_different_sequence():
    a = WormPath(1).take(5)
    b = WormPath(2).take(5)
    assert not all(np.array_equal(qa, qb) for qa, qb in zip(a, b))


def test_instances_do_not_share_state():
    a = WormPath(7)
    b = WormPath(7)
    a.take(10)
    assert np.array_equal(next(b), WormPath(7).take(1)[0])


def test_steps_are_unit_quaternions():
    for q in WormPath(99).take(20):
        assert q.shape == (4,)
        assert np.linalg.norm(q) == pytest.approx(1.0, abs=1e-12)


def test_pitch_applied_in_yawed_frame():
    yaw, pitch = 0.5, 0.3
    path = WormPath(0, yaw_range=(yaw, yaw + 1e-12), pitch_range=(pitch, pitch + 1e-12))
    rotated = quat_rotate(next(path), [0.0, 0.0, -1.0])
    expected = [-math.cos(pitch) * math.sin(yaw),
                math.sin(pitch),
                -math.cos(pitch) * math.cos(yaw)]
    np.testing.assert_allclose(rotated, expected, atol=1e-9)


def test_reseeded_restarts_sequence():
    path = WormPath(11)
    first = path.take(5)
    path.take(3)
    again = path.reseeded().take(5)
    assert all(np.array_equal(a, b) for a, b in zip(first, again))
    assert path.steps_taken == 8


def test_iterator_protocol():
    path = WormPath()
    assert iter(path) is path
    assert len(path.take(3)) == 3


@pytest.mark.parametrize("yaw_range", [(0.1, 0.1), (1.0, 0.0), (0.0, math.inf)])
def test_empty_or_invalid_range_rejected(yaw_range):
    with pytest.raises(InvalidConfigurationError):
        WormPath(1, yaw_range=yaw_range)


@pytest.mark.parametrize("seed", [-1, 2 ** 64, True])
def test_seed_must_be_u64(seed):
    with pytest.raises(InvalidConfigurationError):
        WormPath(seed)


@pytest.mark.parametrize("seed", [None, "4321", float("nan")])
def test_non_numeric_seed_rejected(seed):
    with pytest.raises(InvalidConfigurationError):
        WormPath(seed)
