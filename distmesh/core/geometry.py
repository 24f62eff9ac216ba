"""Geometry primitives on point / simplex arrays.

All helpers take a dense (N, D) float point array and an (M, D+1) integer
simplex array and are fully vectorized over simplices.
"""
from __future__ import annotations

import math

import numpy as np

from .array_utils import select_indexed_rows

__all__ = [
    'simplex_centroids', 'simplex_volumes', 'ensure_positive_orientation',
    'edge_vectors', 'edge_lengths', 'triangle_quality',
]


def simplex_centroids(points, simplices) -> np.ndarray:
    """Mean of the D+1 vertices of each simplex, shape (M, D)."""
    pts = np.asarray(points, dtype=np.float64)
    S = np.asarray(simplices, dtype=np.intp)
    if S.size == 0:
        return np.empty((0, pts.shape[1]), dtype=np.float64)
    centroid = np.zeros((S.shape[0], pts.shape[1]), dtype=np.float64)
    for col in range(S.shape[1]):
        centroid += select_indexed_rows(pts, S[:, col])
    return centroid / S.shape[1]


def simplex_volumes(points, simplices) -> np.ndarray:
    """Signed measure of each simplex (area in 2D, volume in 3D).

    Computed as det([p1-p0, ..., pD-p0]) / D!; positive for
    counter-clockwise triangles and right-handed tetrahedra.
    """
    pts = np.asarray(points, dtype=np.float64)
    S = np.asarray(simplices, dtype=np.intp)
    if S.size == 0:
        return np.empty((0,), dtype=np.float64)
    dim = pts.shape[1]
    if S.shape[1] != dim + 1:
        raise ValueError(f"simplices of {S.shape[1]} vertices do not match {dim}D points")
    p0 = pts[S[:, 0]]
    spans = np.stack([pts[S[:, k]] - p0 for k in range(1, dim + 1)], axis=1)
    return np.linalg.det(spans) / math.factorial(dim)


def ensure_positive_orientation(points, simplices) -> np.ndarray:
    """Return a copy of ``simplices`` with every row positively oriented.

    Rows with negative signed measure get their last two vertices swapped.
    """
    S = np.array(simplices, dtype=np.int64, copy=True)
    if S.size == 0:
        return S
    flip = simplex_volumes(points, S) < 0.0
    if np.any(flip):
        S[flip, -2], S[flip, -1] = S[flip, -1], S[flip, -2].copy()
    return S


def edge_vectors(points, edges) -> np.ndarray:
    """Vector from the second to the first endpoint of every edge."""
    pts = np.asarray(points, dtype=np.float64)
    E = np.asarray(edges, dtype=np.intp)
    if E.size == 0:
        return np.empty((0, pts.shape[1]), dtype=np.float64)
    return select_indexed_rows(pts, E[:, 0]) - select_indexed_rows(pts, E[:, 1])


def edge_lengths(points, edges) -> np.ndarray:
    vec = edge_vectors(points, edges)
    return np.sqrt(np.einsum('ij,ij->i', vec, vec))


def triangle_quality(points, triangles) -> np.ndarray:
    """Radius-ratio quality ``(b+c-a)(c+a-b)(a+b-c) / (abc)`` per triangle.

    1 for an equilateral triangle, 0 for a degenerate one. 2D meshes only.
    """
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(triangles, dtype=np.intp)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("triangle_quality is defined for 2D meshes only")
    if T.size == 0:
        return np.empty((0,), dtype=np.float64)
    p0, p1, p2 = pts[T[:, 0]], pts[T[:, 1]], pts[T[:, 2]]
    a = np.linalg.norm(p1 - p2, axis=1)
    b = np.linalg.norm(p0 - p2, axis=1)
    c = np.linalg.norm(p0 - p1, axis=1)
    denom = np.maximum(a * b * c, 1e-300)
    return np.clip((b + c - a) * (c + a - b) * (a + b - c) / denom, 0.0, 1.0)
