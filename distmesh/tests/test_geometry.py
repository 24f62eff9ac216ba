import numpy as np
import pytest

from distmesh.core.geometry import (
    edge_lengths,
    ensure_positive_orientation,
    simplex_centroids,
    simplex_volumes,
    triangle_quality,
)


def test_triangle_signed_area():
    pts = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    assert np.allclose(simplex_volumes(pts, [[0, 1, 2], [0, 2, 1]]), [0.5, -0.5])


def test_tetrahedron_volume():
    pts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    assert np.isclose(simplex_volumes(pts, [[0, 1, 2, 3]])[0], 1.0 / 6.0)


def test_volume_width_mismatch():
    with pytest.raises(ValueError):
        simplex_volumes(np.zeros((4, 2)), [[0, 1, 2, 3]])


def test_orientation_fix_returns_copy():
    pts = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
    S = np.array([[0, 2, 1], [1, 3, 2]])
    fixed = ensure_positive_orientation(pts, S)
    assert fixed.tolist() == [[0, 1, 2], [1, 3, 2]]
    assert S.tolist() == [[0, 2, 1], [1, 3, 2]]
    assert np.all(simplex_volumes(pts, fixed) > 0)


def test_centroids():
    pts = np.array([[0.0, 0.0], [3.0, 0.0], [0.0, 3.0]])
    assert np.allclose(simplex_centroids(pts, [[0, 1, 2]]), [[1.0, 1.0]])
    with pytest.raises(IndexError):
        simplex_centroids(pts, [[0, 1, 5]])


def test_edge_lengths():
    pts = np.array([[0.0, 0.0], [3.0, 4.0]])
    assert edge_lengths(pts, [[0, 1]]).tolist() == [5.0]


def test_triangle_quality():
    s = np.sqrt(3.0) / 2.0
    pts = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, s], [2.0, 0.0]])
    q = triangle_quality(pts, [[0, 1, 2], [0, 1, 3]])
    assert np.isclose(q[0], 1.0)
    assert np.isclose(q[1], 0.0)
    with pytest.raises(ValueError):
        triangle_quality(np.zeros((4, 3)), [[0, 1, 2]])
