"""Scalar fields over point batches: signed distance and element size functions.

Every field maps an (N, D) array of points to an (N,) array of values in a
single vectorized call. Distance fields are negative inside the domain, zero
on its boundary and positive outside; size fields give the desired local
edge length (only relative values matter to the relaxation).

Fields compose with the set operators ``|`` (union), ``&`` (intersection)
and ``-`` (difference), e.g. ``circle(1.0) - circle(0.4)`` is an annulus.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from numbers import Real
from typing import Callable, Sequence

import numpy as np

from .exceptions import FieldEvaluationError

__all__ = [
    'ScalarField', 'FunctionField', 'ConstantField', 'as_field',
    'circle', 'rectangle', 'ellipse', 'polygon',
    'union', 'intersection', 'difference',
]


class ScalarField(ABC):
    """Capability interface: evaluate a batch of points to a batch of scalars."""

    @abstractmethod
    def _evaluate(self, points: np.ndarray) -> np.ndarray:
        ...

    def evaluate(self, points) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
        values = np.asarray(self._evaluate(pts), dtype=np.float64)
        n = pts.shape[0]
        if values.ndim == 0:
            return np.full(n, float(values))
        values = values.reshape(-1) if values.ndim == 2 and 1 in values.shape else values
        if values.shape != (n,):
            raise FieldEvaluationError(
                f"{type(self).__name__} returned shape {values.shape} for {n} points; expected ({n},)")
        return values

    def __call__(self, points) -> np.ndarray:
        return self.evaluate(points)

    def __or__(self, other):
        return union(self, other)

    def __and__(self, other):
        return intersection(self, other)

    def __sub__(self, other):
        return difference(self, other)


class FunctionField(ScalarField):
    """Wrap a vectorized callable ``f(points) -> values``."""

    def __init__(self, func: Callable[[np.ndarray], np.ndarray], name: str = None):
        if not callable(func):
            raise TypeError(f"expected a callable, got {type(func).__name__}")
        self.func = func
        self.name = name or getattr(func, '__name__', 'field')

    def _evaluate(self, points):
        return self.func(points)

    def __repr__(self):
        return f"FunctionField({self.name})"


class ConstantField(ScalarField):
    """Uniform field, typically a uniform element size."""

    def __init__(self, value: float = 1.0):
        self.value = float(value)

    def _evaluate(self, points):
        return np.full(points.shape[0], self.value)

    def __repr__(self):
        return f"ConstantField({self.value!r})"


def as_field(obj) -> ScalarField:
    """Adapt a ScalarField, a vectorized callable or a number to a ScalarField."""
    if isinstance(obj, ScalarField):
        return obj
    if isinstance(obj, Real):
        return ConstantField(float(obj))
    if callable(obj):
        return FunctionField(obj)
    raise TypeError(f"cannot interpret {type(obj).__name__} as a scalar field")


# ---------------------------------------------------------------------------
# Signed distance primitives
# ---------------------------------------------------------------------------

def circle(radius: float = 1.0, center: Sequence[float] = None) -> ScalarField:
    """Sphere of the given radius (circle in 2D); dimension follows ``center``."""
    r = float(radius)
    c = None if center is None else np.asarray(center, dtype=np.float64)

    def _sdf(p):
        q = p if c is None else p - c
        return np.sqrt(np.einsum('ij,ij->i', q, q)) - r

    return FunctionField(_sdf, name=f'circle(r={r:g})')


def rectangle(lower: Sequence[float] = (-1.0, -1.0), upper: Sequence[float] = (1.0, 1.0)) -> ScalarField:
    """Axis-aligned box ``[lower, upper]`` in any dimension, exact distance."""
    lo = np.asarray(lower, dtype=np.float64)
    hi = np.asarray(upper, dtype=np.float64)
    if lo.shape != hi.shape or np.any(hi <= lo):
        raise ValueError("rectangle needs matching lower/upper corners with upper > lower")
    center = 0.5 * (lo + hi)
    half = 0.5 * (hi - lo)

    def _sdf(p):
        q = np.abs(p - center) - half
        outside = np.sqrt(np.sum(np.maximum(q, 0.0) ** 2, axis=1))
        inside = np.minimum(q.max(axis=1), 0.0)
        return outside + inside

    return FunctionField(_sdf, name='rectangle')


def ellipse(radii: Sequence[float] = (1.0, 0.5), center: Sequence[float] = (0.0, 0.0)) -> ScalarField:
    """Ellipse (or ellipsoid) with semi-axes ``radii``; first-order distance estimate."""
    r = np.asarray(radii, dtype=np.float64)
    c = np.asarray(center, dtype=np.float64)
    if np.any(r <= 0):
        raise ValueError("ellipse radii must be positive")

    def _sdf(p):
        q = p - c
        k0 = np.sqrt(np.sum((q / r) ** 2, axis=1))
        k1 = np.sqrt(np.sum((q / (r * r)) ** 2, axis=1))
        # at the center k1 == 0; the distance there is -min(radii)
        safe = k1 > 0
        out = np.full(q.shape[0], -float(r.min()))
        out[safe] = k0[safe] * (k0[safe] - 1.0) / k1[safe]
        return out

    return FunctionField(_sdf, name='ellipse')


def polygon(vertices: Sequence[Sequence[float]]) -> ScalarField:
    """Simple 2D polygon given by its vertex loop; exact distance, sign by ray casting."""
    v = np.asarray(vertices, dtype=np.float64)
    if v.ndim != 2 or v.shape[1] != 2 or v.shape[0] < 3:
        raise ValueError("polygon needs at least three 2D vertices")
    a = v
    b = np.roll(v, -1, axis=0)
    ab = b - a
    ab2 = np.maximum(np.einsum('ij,ij->i', ab, ab), 1e-300)

    def _sdf(p):
        # (N, V, 2) point-to-segment vectors
        ap = p[:, None, :] - a[None, :, :]
        t = np.clip(np.einsum('nvk,vk->nv', ap, ab) / ab2, 0.0, 1.0)
        diff = ap - t[..., None] * ab[None, :, :]
        dist = np.sqrt(np.min(np.einsum('nvk,nvk->nv', diff, diff), axis=1))
        x = p[:, 0][:, None]
        y = p[:, 1][:, None]
        y0 = a[:, 1][None, :]
        y1 = b[:, 1][None, :]
        crosses = (y0 > y) != (y1 > y)
        dy = np.where(y1 - y0 == 0.0, 1e-300, y1 - y0)
        xint = (b[:, 0] - a[:, 0])[None, :] * (y - y0) / dy + a[:, 0][None, :]
        inside = np.count_nonzero(crosses & (x < xint), axis=1) % 2 == 1
        return np.where(inside, -dist, dist)

    return FunctionField(_sdf, name=f'polygon({v.shape[0]})')


# ---------------------------------------------------------------------------
# Set combinators
# ---------------------------------------------------------------------------

def union(first, second) -> ScalarField:
    f, g = as_field(first), as_field(second)
    return FunctionField(lambda p: np.minimum(f(p), g(p)), name=f'union({f!r}, {g!r})')


def intersection(first, second) -> ScalarField:
    f, g = as_field(first), as_field(second)
    return FunctionField(lambda p: np.maximum(f(p), g(p)), name=f'intersection({f!r}, {g!r})')


def difference(first, second) -> ScalarField:
    f, g = as_field(first), as_field(second)
    return FunctionField(lambda p: np.maximum(f(p), -g(p)), name=f'difference({f!r}, {g!r})')
