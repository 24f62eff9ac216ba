"""Initial point distribution inside the bounding box.

A regular grid of spacing h0 covers the bounding box; grid points outside
the domain are rejected and the remainder is thinned at random so the local
density follows the size field. Fixed points are prepended unchanged.
"""
from __future__ import annotations

from typing import Optional, Union

import numpy as np
from scipy.spatial import cKDTree

from .constants import PRECISION
from .exceptions import ConfigurationError, FieldEvaluationError, InvalidBoundingBoxError
from .fields import as_field
from .logging_utils import get_logger

logger = get_logger('distmesh.sampling')

__all__ = ['bounding_box', 'validate_bounding_box', 'as_fixed_points', 'grid_points', 'sample_points']

SeedLike = Union[None, int, np.random.Generator]


def bounding_box(dimension: int) -> np.ndarray:
    """Default box ``[-1, 1]`` along each of ``dimension`` axes, shape (D, 2)."""
    if int(dimension) != dimension or dimension < 1:
        raise InvalidBoundingBoxError(f"dimension must be a positive integer, got {dimension!r}")
    box = np.empty((int(dimension), 2), dtype=np.float64)
    box[:, 0] = -1.0
    box[:, 1] = 1.0
    return box


def validate_bounding_box(box) -> np.ndarray:
    """Return ``box`` as a (D, 2) float array of per-axis ``[min, max]``.

    Raises InvalidBoundingBoxError for wrong shapes, non-finite values and
    axes with zero or negative extent.
    """
    arr = np.asarray(box, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2 or arr.shape[0] < 1:
        raise InvalidBoundingBoxError(f"bounding box must have shape (D, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidBoundingBoxError("bounding box contains non-finite values")
    bad = np.nonzero(arr[:, 1] <= arr[:, 0])[0]
    if bad.size:
        axis = int(bad[0])
        raise InvalidBoundingBoxError(
            f"bounding box has no extent along axis {axis}: [{arr[axis, 0]}, {arr[axis, 1]}]",
            dimension=axis)
    return arr


def as_fixed_points(fixed_points, dimension: int) -> np.ndarray:
    """Coerce optional fixed points to an (F, D) float array (F may be 0)."""
    if fixed_points is None:
        return np.empty((0, dimension), dtype=np.float64)
    pfix = np.asarray(fixed_points, dtype=np.float64)
    if pfix.size == 0:
        return np.empty((0, dimension), dtype=np.float64)
    pfix = np.atleast_2d(pfix)
    if pfix.ndim != 2 or pfix.shape[1] != dimension:
        raise InvalidBoundingBoxError(
            f"fixed points of shape {pfix.shape} do not match a {dimension}D bounding box")
    return pfix


def grid_points(box, h0: float) -> np.ndarray:
    """Cartesian grid of spacing h0 anchored at the box minimum.

    Axis k holds ``1 + floor((max_k - min_k) / h0)`` values; the first axis
    varies fastest.
    """
    box = validate_bounding_box(box)
    counts = 1 + np.floor((box[:, 1] - box[:, 0]) / h0).astype(np.int64)
    axes = [box[k, 0] + h0 * np.arange(counts[k]) for k in range(box.shape[0])]
    mesh = np.meshgrid(*axes, indexing='ij')
    return np.column_stack([m.ravel(order='F') for m in mesh])


def _generator(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def sample_points(
    distance,
    size,
    h0: float,
    box,
    fixed_points=None,
    *,
    precision: float = PRECISION,
    seed: SeedLike = None,
) -> np.ndarray:
    """Return the initial (F + K, D) point set, fixed points first.

    Parameters
    ----------
    distance, size : ScalarField or vectorized callable
        Signed distance and element size fields.
    h0 : float
        Grid spacing (initial edge length).
    box : array-like, shape (D, 2)
        Per-axis ``[min, max]`` of the sampling domain.
    fixed_points : array-like, shape (F, D), optional
        Prepended without filtering.
    precision : float
        Grid points with ``distance >= precision * h0`` are rejected.
    seed : int, numpy Generator or None
        Source of the thinning draws.

    Notes
    -----
    Grid point p survives thinning with probability ``(h_min / h(p))**D``
    where ``h_min`` is the smallest size over the surviving grid points.
    Sampled points within ``precision * h0`` of a fixed point are dropped.
    The result may hold fewer than D+1 points; callers that triangulate must
    check.
    """
    if not h0 > 0:
        raise ConfigurationError(f"h0 must be > 0, got {h0!r}")
    box = validate_bounding_box(box)
    dim = box.shape[0]
    fd = as_field(distance)
    fh = as_field(size)
    pfix = as_fixed_points(fixed_points, dim)

    p = grid_points(box, h0)
    n_grid = p.shape[0]
    p = p[fd(p) < precision * h0]
    n_inside = p.shape[0]

    if n_inside:
        h = fh(p)
        valid = np.isfinite(h) & (h > 0)
        if not np.any(valid):
            raise FieldEvaluationError("size field returned no positive finite value inside the domain")
        p = p[valid]
        h = h[valid]
        rng = _generator(seed)
        keep = rng.random(p.shape[0]) < (h.min() / h) ** dim
        p = p[keep]

    if pfix.shape[0] and p.shape[0]:
        dist, _ = cKDTree(pfix).query(p)
        p = p[dist > precision * h0]

    logger.debug('sampling: grid=%d inside=%d kept=%d fixed=%d', n_grid, n_inside, p.shape[0], pfix.shape[0])
    return np.vstack((pfix, p))
