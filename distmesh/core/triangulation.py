"""Delaunay triangulation of a point array (scipy / Qhull backend)."""
from __future__ import annotations

import numpy as np
from scipy.spatial import Delaunay, QhullError

from .exceptions import DegenerateSamplingError

__all__ = ['delaunay']


def delaunay(points) -> np.ndarray:
    """Return the (M, D+1) simplex index array of the Delaunay triangulation.

    Raises DegenerateSamplingError when there are fewer than D+1 points or
    when Qhull cannot triangulate them (e.g. all points collinear in 2D).
    Duplicate points are left out of every simplex by Qhull.
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2:
        raise ValueError(f"points must be a 2D array, got shape {pts.shape}")
    n, dim = pts.shape
    if n < dim + 1:
        raise DegenerateSamplingError(
            f"{n} points cannot be triangulated in {dim}D (need at least {dim + 1})",
            point_count=n, dimension=dim)
    try:
        tri = Delaunay(pts)
    except QhullError as exc:
        raise DegenerateSamplingError(
            f"Delaunay triangulation failed for {n} points in {dim}D: {exc}",
            point_count=n, dimension=dim) from exc
    return np.ascontiguousarray(tri.simplices, dtype=np.int64)
