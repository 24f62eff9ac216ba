"""Tests for bounding boxes and the initial point distribution."""
import numpy as np
import pytest

from distmesh import (
    ConfigurationError,
    FieldEvaluationError,
    InvalidBoundingBoxError,
    bounding_box,
    circle,
    rectangle,
    sample_points,
)
from distmesh.core.sampling import as_fixed_points, grid_points, validate_bounding_box


def _graded(p):
    return 1.0 + 2.0 * np.abs(p[:, 0])


class TestBoundingBox:
    def test_default_box(self):
        box = bounding_box(3)
        assert box.shape == (3, 2)
        assert np.all(box[:, 0] == -1.0) and np.all(box[:, 1] == 1.0)

    @pytest.mark.parametrize("dim", [0, -2, 1.5])
    def test_invalid_dimension(self, dim):
        with pytest.raises(InvalidBoundingBoxError):
            bounding_box(dim)

    def test_axis_without_extent_reports_axis(self):
        with pytest.raises(InvalidBoundingBoxError) as exc:
            validate_bounding_box([[0.0, 1.0], [2.0, 2.0]])
        assert exc.value.dimension == 1

    def test_wrong_shape(self):
        with pytest.raises(InvalidBoundingBoxError):
            validate_bounding_box([0.0, 1.0])

    def test_fixed_points_dimension_mismatch(self):
        with pytest.raises(InvalidBoundingBoxError):
            as_fixed_points([[0.0, 0.0, 0.0]], 2)


def test_grid_first_axis_fastest():
    p = grid_points([[0.0, 1.0], [0.0, 0.5]], 0.5)
    expected = [[0.0, 0.0], [0.5, 0.0], [1.0, 0.0], [0.0, 0.5], [0.5, 0.5], [1.0, 0.5]]
    assert np.allclose(p, expected)


def test_uniform_size_keeps_every_inside_point():
    fd = circle(1.0)
    h0 = 0.25
    p = sample_points(fd, 1.0, h0, bounding_box(2), seed=1)
    grid = grid_points(bounding_box(2), h0)
    inside = grid[fd(grid) < 1e-3 * h0]
    assert np.array_equal(p, inside)
    assert np.all(fd(p) < 1e-3 * h0)


def test_seed_reproducible():
    fd = rectangle((-1.0, -1.0), (1.0, 1.0))
    a = sample_points(fd, _graded, 0.1, bounding_box(2), seed=7)
    b = sample_points(fd, _graded, 0.1, bounding_box(2), seed=7)
    c = sample_points(fd, _graded, 0.1, bounding_box(2), seed=8)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_thinning_follows_size_field():
    fd = rectangle((-1.0, -1.0), (1.0, 1.0))
    p = sample_points(fd, _graded, 0.05, bounding_box(2), seed=0)
    near_axis = np.count_nonzero(np.abs(p[:, 0]) < 0.25)
    near_edge = np.count_nonzero(np.abs(p[:, 0]) > 0.75)
    # h is about 1.25 near the axis and 2.75 near the sides
    assert near_axis > 2 * near_edge


def test_fixed_points_prefix_and_no_duplicates(square_corners):
    fd = rectangle((-1.0, -1.0), (1.0, 1.0))
    p = sample_points(fd, 1.0, 0.25, bounding_box(2), square_corners, seed=0)
    assert np.array_equal(p[:4], square_corners)
    # the grid also hits the corners; those copies are dropped
    assert p.shape == (81, 2)
    d = np.linalg.norm(p[4:, None, :] - square_corners[None, :, :], axis=2)
    assert d.min() > 1e-3 * 0.25


def test_everything_rejected_returns_only_fixed_points():
    outside = lambda p: np.ones(p.shape[0])  # noqa: E731
    p = sample_points(outside, 1.0, 0.2, bounding_box(2), seed=0)
    assert p.shape == (0, 2)
    pfix = np.array([[0.0, 0.0]])
    p = sample_points(outside, 1.0, 0.2, bounding_box(2), pfix, seed=0)
    assert np.array_equal(p, pfix)


def test_nonpositive_h0_rejected():
    with pytest.raises(ConfigurationError):
        sample_points(circle(1.0), 1.0, 0.0, bounding_box(2))


def test_size_field_without_positive_values():
    with pytest.raises(FieldEvaluationError):
        sample_points(circle(1.0), lambda p: -np.ones(p.shape[0]), 0.2, bounding_box(2))


def test_generator_seed_accepted():
    rng = np.random.default_rng(5)
    p = sample_points(circle(1.0), _graded, 0.2, bounding_box(2), seed=rng)
    assert p.ndim == 2 and p.shape[1] == 2 and p.shape[0] > 0
