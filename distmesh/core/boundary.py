"""Boundary edge extraction and orientation.

An edge is on the boundary when exactly one simplex-edge incidence refers
to it. In 2D every boundary edge additionally gets an orientation flag:
it is *reversed* when its stored direction ``edges[i, 0] -> edges[i, 1]``
runs clockwise around the triangle that owns it, i.e. when the triangle's
third vertex lies to the right of the edge.
"""
from __future__ import annotations

from typing import NamedTuple, Optional

import numpy as np

from .edges import simplex_edge_indices, unique_edges

__all__ = ['BoundaryEdges', 'bound_edges', 'boundary_edge_indices']


class BoundaryEdges(NamedTuple):
    """Boundary edges of a mesh.

    Attributes
    ----------
    indices : ndarray of int, shape (B,)
        Rows of ``edges`` that lie on the boundary, in order of first
        appearance while walking the simplices.
    reversed : ndarray of bool, shape (B,)
        True where the stored edge direction must be flipped to run
        counter-clockwise around its triangle. Always False outside 2D.
    edges : ndarray of int, shape (E, 2)
        The edge array ``indices`` refers to.
    """
    indices: np.ndarray
    reversed: np.ndarray
    edges: np.ndarray

    def signed(self) -> np.ndarray:
        """One-array encoding ``+(i + 1)`` / ``-(i + 1)`` (1-based so edge 0 keeps its sign)."""
        enc = self.indices.astype(np.int64) + 1
        return np.where(self.reversed, -enc, enc)

    def oriented(self) -> np.ndarray:
        """(B, 2) node pairs of the boundary edges with reversed edges swapped."""
        pairs = self.edges[self.indices].copy()
        pairs[self.reversed] = pairs[self.reversed][:, ::-1]
        return pairs


def boundary_edge_indices(edge_indices) -> np.ndarray:
    """Edge rows referenced exactly once in a (M, K) simplex-edge index array.

    Order follows the first occurrence in row-major order. Counting (rather
    than toggling a parity flag) keeps edges shared by three or more
    simplices off the boundary.
    """
    flat = np.asarray(edge_indices, dtype=np.int64).reshape(-1)
    if flat.size == 0:
        return np.empty((0,), dtype=np.int64)
    uniq, first, counts = np.unique(flat, return_index=True, return_counts=True)
    once = counts == 1
    order = np.argsort(first[once], kind='stable')
    return uniq[once][order]


def bound_edges(nodes, simplices, edges: Optional[np.ndarray] = None) -> BoundaryEdges:
    """Return the boundary edges of a triangulation.

    Parameters
    ----------
    nodes : (N, D) array
        Point coordinates.
    simplices : (M, D+1) int array
        Triangulation.
    edges : (E, 2) int array, optional
        Edge array to index into; derived with unique_edges() when omitted
        or empty.
    """
    pts = np.asarray(nodes, dtype=np.float64)
    S = np.asarray(simplices, dtype=np.int64)
    if edges is None or np.asarray(edges).size == 0:
        E = unique_edges(S)
    else:
        E = np.asarray(edges, dtype=np.int64).reshape(-1, 2)
    if S.size == 0:
        empty = np.empty((0,), dtype=np.int64)
        return BoundaryEdges(empty, np.zeros((0,), dtype=bool), E)

    edge_idx = simplex_edge_indices(S, E)
    boundary = boundary_edge_indices(edge_idx)
    flipped = np.zeros(boundary.shape, dtype=bool)

    if pts.shape[1] == 2 and boundary.size:
        # a boundary edge has exactly one incidence, so its owner is unambiguous
        owner_of = np.full(E.shape[0], -1, dtype=np.int64)
        owner_of[edge_idx.reshape(-1)] = np.repeat(np.arange(S.shape[0]), S.shape[1])
        owner = owner_of[boundary]
        a = E[boundary, 0]
        b = E[boundary, 1]
        tri = S[owner]
        third = np.where((tri != a[:, None]) & (tri != b[:, None]), tri, -1).max(axis=1)
        v1 = pts[b] - pts[a]
        v2 = pts[third] - pts[b]
        cross = v1[:, 0] * v2[:, 1] - v1[:, 1] * v2[:, 0]
        flipped = cross < 0.0

    return BoundaryEdges(boundary, flipped, E)
