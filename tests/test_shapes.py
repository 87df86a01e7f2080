import math

import numpy as np
import pytest

from halfpipe.models import HalfCylinder, HalfCylinderPath, InvalidConfigurationError
from halfpipe.shapes import (
    half_cylinder, half_cylinder_path, straight_rings, triangulate_rings,
)
from halfpipe.vecmath import triangle_normals


def assert_faces_agree_with_normals(mesh):
    faces = mesh.faces.astype(np.int64)
    face_n = triangle_normals(mesh.positions, faces)
    vert_n = mesh.normals[faces].sum(axis=1)
    dots = np.einsum('ij,ij->i', face_n, vert_n)
    assert (dots > 0).all(), f"{(dots <= 0).sum()} faces wound against their normals"


def assert_unit_normals(mesh):
    lengths = np.linalg.norm(mesh.normals, axis=1)
    np.testing.assert_allclose(lengths, 1.0, atol=1e-5)


# ── Straight primitive ──────────────────────────────────────────────────

def test_default_half_cylinder_counts():
    mesh = half_cylinder(HalfCylinder(start=(0, 0, -0.5), end=(0, 0, 0.5),
                                      radius=0.5, subdivisions=10))
    assert mesh.vertex_count == 22
    assert len(mesh.indices) == 60
    assert mesh.triangle_count == 20


def test_half_cylinder_geometry():
    mesh = half_cylinder()
    np.testing.assert_allclose(np.unique(mesh.positions[:, 2]), [-0.5, 0.5])
    radial = np.linalg.norm(mesh.positions[:, :2], axis=1)
    np.testing.assert_allclose(radial, 0.5, atol=1e-6)
    # Arc hangs below the axis: a trough, open on top
    assert mesh.positions[:, 1].max() == pytest.approx(0.0, abs=1e-6)
    assert mesh.positions[:, 1].min() == pytest.approx(-0.5, abs=1e-6)


def test_half_cylinder_normals_and_winding():
    mesh = half_cylinder()
    assert_unit_normals(mesh)
    assert_faces_agree_with_normals(mesh)
    # Bottom of the trough faces up, toward the axis
    np.testing.assert_allclose(mesh.normals[5], [0.0, 1.0, 0.0], atol=1e-6)


def test_reversed_half_cylinder_still_faces_inward():
    mesh = half_cylinder(HalfCylinder(start=(0, 0, 0.5), end=(0, 0, -0.5)))
    assert_faces_agree_with_normals(mesh)


def test_from_scale_and_from_radius_and_length():
    scaled = HalfCylinder.from_scale(4.0)
    assert scaled.radius == 2.0
    assert scaled.start == (0.0, 0.0, -2.0)
    assert scaled.end == (0.0, 0.0, 2.0)

    sized = HalfCylinder.from_radius_and_length(3.0, 10.0)
    assert sized.radius == 3.0
    assert sized.end == (0.0, 0.0, 5.0)


def test_uvs_are_zero_placeholders():
    mesh = half_cylinder()
    assert mesh.uvs.shape == (22, 2)
    assert not mesh.uvs.any()


def test_vertical_axis_falls_back_to_zero_normals():
    mesh = half_cylinder(HalfCylinder(start=(0, 0, 0), end=(0, 1, 0)))
    assert np.isfinite(mesh.positions).all()
    assert np.isfinite(mesh.normals).all()
    assert not mesh.normals.any()


def test_coincident_endpoints_do_not_produce_nan():
    rings = straight_rings((1, 2, 3), (1, 2, 3), 0.5)
    mesh = triangulate_rings(rings, 4)
    assert np.isfinite(mesh.positions).all()
    assert not mesh.normals.any()


def test_buffers_are_read_only():
    mesh = half_cylinder()
    with pytest.raises(ValueError):
        mesh.positions[0, 0] = 1.0
    with pytest.raises(ValueError):
        mesh.indices[0] = 0


# ── Swept track ─────────────────────────────────────────────────────────

def test_swept_track_counts_and_determinism():
    config = HalfCylinderPath(seed=4321, n_segments=10, subdivisions=10, radius=75.0)
    mesh = half_cylinder_path(config)
    assert mesh.vertex_count == 121
    assert len(mesh.indices) == 600

    again = half_cylinder_path(HalfCylinderPath(seed=4321, n_segments=10,
                                                subdivisions=10, radius=75.0))
    assert np.array_equal(mesh.positions, again.positions)
    assert np.array_equal(mesh.normals, again.normals)
    assert np.array_equal(mesh.indices, again.indices)


def test_swept_track_normals_are_unit():
    mesh = half_cylinder_path(HalfCylinderPath(seed=4321, n_segments=10,
                                               subdivisions=10, radius=75.0))
    assert_unit_normals(mesh)


@pytest.mark.parametrize("seed", [4321, 1, 77])
def test_gentle_swept_track_winding(seed):
    config = HalfCylinderPath(seed=seed, n_segments=10, subdivisions=10, radius=75.0,
                              yaw_range=(-0.3, 0.3), pitch_range=(-0.1, 0.1))
    mesh = half_cylinder_path(config)
    assert_unit_normals(mesh)
    assert_faces_agree_with_normals(mesh)


@pytest.mark.parametrize("n_segments,subdivisions", [(1, 1), (3, 2), (7, 16), (25, 5)])
def test_indices_in_bounds(n_segments, subdivisions):
    config = HalfCylinderPath(seed=n_segments, n_segments=n_segments,
                              subdivisions=subdivisions, radius=5.0,
                              segment_length=10.0)
    mesh = half_cylinder_path(config)
    assert mesh.vertex_count == (subdivisions + 1) * (n_segments + 1)
    assert mesh.triangle_count == 2 * subdivisions * n_segments
    assert mesh.indices.dtype == np.uint32
    assert int(mesh.indices.max()) < mesh.vertex_count


def test_different_seeds_give_different_tracks():
    a = half_cylinder_path(HalfCylinderPath(seed=1, n_segments=5))
    b = half_cylinder_path(HalfCylinderPath(seed=2, n_segments=5))
    assert not np.array_equal(a.positions, b.positions)


def test_zero_segments_is_single_ring():
    mesh = half_cylinder_path(HalfCylinderPath(n_segments=0, subdivisions=10))
    assert mesh.vertex_count == 11
    assert mesh.triangle_count == 0
    assert len(mesh.indices) == 0


def test_identity_path_runs_straight_along_forward():
    identity = iter([np.array([1.0, 0.0, 0.0, 0.0])] * 3)
    config = HalfCylinderPath(start=(0, 0, 0), forward=(0, 0, -1), radius=2.0,
                              segment_length=10.0, n_segments=2, subdivisions=10)
    mesh = half_cylinder_path(config, path=identity)
    for k in range(3):
        ring = mesh.positions[k * 11:(k + 1) * 11]
        np.testing.assert_allclose(ring[0], [2.0, 0.0, -10.0 * k], atol=1e-5)
        np.testing.assert_allclose(ring[5], [0.0, -2.0, -10.0 * k], atol=1e-5)
        np.testing.assert_allclose(ring[10], [-2.0, 0.0, -10.0 * k], atol=1e-5)
    assert_faces_agree_with_normals(mesh)


def test_short_path_rejected():
    identity = [np.array([1.0, 0.0, 0.0, 0.0])] * 2
    with pytest.raises(InvalidConfigurationError):
        half_cylinder_path(HalfCylinderPath(n_segments=5), path=identity)


# ── Configuration ───────────────────────────────────────────────────────

def test_zero_subdivisions_rejected():
    with pytest.raises(InvalidConfigurationError):
        HalfCylinderPath(subdivisions=0)
    with pytest.raises(InvalidConfigurationError):
        HalfCylinder(subdivisions=0)
    with pytest.raises(InvalidConfigurationError):
        triangulate_rings(straight_rings((0, 0, 0), (0, 0, 1), 1.0), 0)


@pytest.mark.parametrize("kwargs", [
    {"radius": 0.0},
    {"radius": -1.0},
    {"n_segments": -1},
    {"segment_length": 0.0},
    {"forward": (0, 0, 0)},
    {"seed": -5},
    {"yaw_range": (0.2, 0.2)},
    {"pitch_range": (0.5, -0.5)},
])
def test_invalid_track_config_rejected(kwargs):
    with pytest.raises(InvalidConfigurationError):
        HalfCylinderPath(**kwargs)


def test_track_config_defaults():
    config = HalfCylinderPath()
    assert config.seed == 4321
    assert config.radius == 75.0
    assert config.n_segments == 100
    assert config.yaw_range == pytest.approx((-math.pi / 4, math.pi / 4))
    assert config.vertex_count == 11 * 101


def test_default_ranges_swept_track_winding():
    mesh = half_cylinder_path(HalfCylinderPath(seed=4321, n_segments=10,
                                               subdivisions=10, radius=75.0))
    assert_faces_agree_with_normals(mesh)


@pytest.mark.parametrize("kwargs", [
    {"subdivisions": None},
    {"subdivisions": float("nan")},
    {"subdivisions": "ten"},
    {"n_segments": None},
    {"n_segments": float("inf")},
    {"radius": None},
    {"radius": float("nan")},
    {"segment_length": "long"},
    {"seed": None},
    {"start": ("a", 0, 0)},
])
def test_non_numeric_track_config_rejected(kwargs):
    with pytest.raises(InvalidConfigurationError):
        HalfCylinderPath(**kwargs)


@pytest.mark.parametrize("kwargs", [
    {"subdivisions": None},
    {"subdivisions": float("nan")},
    {"radius": "wide"},
])
def test_non_numeric_primitive_config_rejected(kwargs):
    with pytest.raises(InvalidConfigurationError):
        HalfCylinder(**kwargs)
