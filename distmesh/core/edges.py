"""Unique edge ("bar") extraction from simplex arrays.

Local edges of a simplex row ``[v0, ..., vD]`` are the cyclically adjacent
pairs ``(v_i, v_{(i+1) mod (D+1)})``. Every pair is canonicalized with the
smaller point index first and the global edge array is sorted
lexicographically, so the output depends only on the set of pairs present.
"""
from __future__ import annotations

import numpy as np

__all__ = ['local_edges', 'unique_edges', 'simplex_edge_indices']


def local_edges(simplices) -> np.ndarray:
    """Canonical local edges of every simplex, shape (M, D+1, 2).

    Entry ``[m, i]`` is the pair (v_i, v_{i+1}) of simplex m, sorted so the
    smaller index comes first.
    """
    S = np.asarray(simplices, dtype=np.int64)
    if S.ndim != 2:
        raise ValueError(f"simplices must be a 2D array, got shape {S.shape}")
    pairs = np.stack((S, np.roll(S, -1, axis=1)), axis=2)
    pairs.sort(axis=2)
    return pairs


def unique_edges(simplices) -> np.ndarray:
    """Return the deduplicated (E, 2) edge array of a simplex array.

    No unordered pair appears twice and every local edge of every simplex
    appears exactly once. Rows are ``(smaller, larger)`` in lexicographic
    order.
    """
    S = np.asarray(simplices, dtype=np.int64)
    if S.size == 0:
        return np.empty((0, 2), dtype=np.int64)
    pairs = local_edges(S).reshape(-1, 2)
    return np.unique(pairs, axis=0)


def _edge_keys(pairs: np.ndarray, base: int) -> np.ndarray:
    return pairs[..., 0] * base + pairs[..., 1]


def simplex_edge_indices(simplices, edges) -> np.ndarray:
    """Map each simplex's D+1 local edges to their row in ``edges``.

    ``edges`` need not be sorted nor canonical; each row is matched as an
    unordered pair. Raises ValueError if some local edge is missing.
    """
    S = np.asarray(simplices, dtype=np.int64)
    E = np.sort(np.asarray(edges, dtype=np.int64).reshape(-1, 2), axis=1)
    if S.size == 0:
        return np.empty((0, S.shape[1] if S.ndim == 2 else 0), dtype=np.int64)
    pairs = local_edges(S)
    base = int(max(S.max(), E.max() if E.size else 0)) + 1
    edge_keys = _edge_keys(E, base)
    order = np.argsort(edge_keys, kind='stable')
    sorted_keys = edge_keys[order]
    wanted = _edge_keys(pairs, base)
    pos = np.searchsorted(sorted_keys, wanted)
    pos = np.minimum(pos, max(sorted_keys.size - 1, 0))
    if sorted_keys.size == 0 or np.any(sorted_keys[pos] != wanted):
        raise ValueError("edge array does not contain every edge of the simplices")
    return order[pos]
