import numpy as np
import pytest

from distmesh import (
    ConstantField,
    FieldEvaluationError,
    FunctionField,
    ScalarField,
    as_field,
    circle,
    ellipse,
    polygon,
    rectangle,
)


def test_circle_signed_distance():
    fd = circle(1.0)
    d = fd(np.array([[0.0, 0.0], [1.0, 0.0], [3.0, 4.0]]))
    assert np.allclose(d, [-1.0, 0.0, 4.0])


def test_circle_with_center():
    fd = circle(0.5, center=(1.0, 1.0))
    assert np.allclose(fd(np.array([[1.0, 1.0], [1.0, 2.0]])), [-0.5, 0.5])


def test_rectangle_exact_distance():
    fd = rectangle((-1.0, -1.0), (1.0, 1.0))
    d = fd(np.array([[0.0, 0.0], [0.5, 0.0], [2.0, 0.0], [2.0, 2.0]]))
    assert np.allclose(d, [-1.0, -0.5, 1.0, np.sqrt(2.0)])


def test_rectangle_rejects_inverted_corners():
    with pytest.raises(ValueError):
        rectangle((1.0, 1.0), (0.0, 2.0))


def test_ellipse_level_set():
    fd = ellipse((1.0, 0.5))
    d = fd(np.array([[1.0, 0.0], [0.0, 0.5], [0.0, 0.0]]))
    assert np.allclose(d, [0.0, 0.0, -0.5])
    assert fd(np.array([[2.0, 0.0]]))[0] > 0.0


def test_polygon_square():
    fd = polygon([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])
    d = fd(np.array([[0.5, 0.5], [0.25, 0.5], [2.0, 0.5], [1.0, 0.5]]))
    assert np.allclose(d, [-0.5, -0.25, 1.0, 0.0])


def test_polygon_concave_sign():
    # L-shape; the notch corner region is outside
    fd = polygon([(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)])
    assert fd(np.array([[0.5, 1.5]]))[0] < 0.0
    assert fd(np.array([[1.5, 1.5]]))[0] > 0.0


def test_set_operators():
    annulus = circle(1.0) - circle(0.4)
    d = annulus(np.array([[0.7, 0.0], [0.0, 0.0], [2.0, 0.0]]))
    assert np.allclose(d, [-0.3, 0.4, 1.0])
    both = circle(1.0, center=(-0.5, 0.0)) | circle(1.0, center=(0.5, 0.0))
    assert both(np.array([[1.4, 0.0]]))[0] < 0.0
    lens = circle(1.0, center=(-0.5, 0.0)) & circle(1.0, center=(0.5, 0.0))
    assert lens(np.array([[1.4, 0.0]]))[0] > 0.0
    assert lens(np.array([[0.0, 0.0]]))[0] < 0.0
    assert isinstance(annulus, ScalarField)


def test_as_field_adapts():
    assert isinstance(as_field(2.5), ConstantField)
    assert np.allclose(as_field(2.5)(np.zeros((3, 2))), 2.5)
    fd = circle(1.0)
    assert as_field(fd) is fd
    wrapped = as_field(lambda p: p[:, 0])
    assert isinstance(wrapped, FunctionField)
    with pytest.raises(TypeError):
        as_field("circle")


def test_scalar_result_is_broadcast():
    f = FunctionField(lambda p: 3.0)
    assert f(np.zeros((4, 2))).tolist() == [3.0] * 4


def test_column_result_is_flattened():
    f = FunctionField(lambda p: p[:, :1])
    assert f(np.array([[1.0, 2.0], [3.0, 4.0]])).tolist() == [1.0, 3.0]


def test_wrong_shape_raises():
    f = FunctionField(lambda p: np.zeros(p.shape[0] + 1))
    with pytest.raises(FieldEvaluationError):
        f(np.zeros((3, 2)))
