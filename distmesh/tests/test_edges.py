"""Tests for unique edge extraction and the simplex -> edge index map."""
import numpy as np
import pytest

from distmesh.core.edges import local_edges, simplex_edge_indices, unique_edges


def test_two_triangles_share_one_edge():
    edges = unique_edges(np.array([[0, 1, 2], [1, 2, 3]]))
    expected = np.array([[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]])
    # 5 unique edges, not 6: the shared edge {1,2} appears once
    assert edges.shape == (5, 2)
    assert np.array_equal(edges, expected)


def test_unique_edges_is_order_independent():
    a = unique_edges(np.array([[0, 1, 2], [1, 2, 3]]))
    b = unique_edges(np.array([[3, 2, 1], [2, 0, 1]]))
    assert np.array_equal(a, b)


def test_unique_edges_canonical_and_sorted():
    rng = np.random.default_rng(3)
    S = np.array([rng.permutation(8)[:3] for _ in range(20)])
    E = unique_edges(S)
    assert np.all(E[:, 0] < E[:, 1])
    keys = E[:, 0] * 100 + E[:, 1]
    assert np.all(np.diff(keys) > 0)
    # every local edge of every simplex is present
    want = {tuple(sorted((int(s[i]), int(s[(i + 1) % 3])))) for s in S for i in range(3)}
    assert want == {tuple(e) for e in E.tolist()}


def test_empty_simplices_give_empty_edges():
    E = unique_edges(np.empty((0, 3), dtype=int))
    assert E.shape == (0, 2)


def test_local_edges_are_cyclic_pairs():
    L = local_edges(np.array([[4, 1, 7]]))
    assert L.shape == (1, 3, 2)
    assert L[0].tolist() == [[1, 4], [1, 7], [4, 7]]


def test_tetrahedron_uses_cyclic_local_edges():
    # only the D+1 cyclically adjacent pairs are extracted, not all six
    E = unique_edges(np.array([[0, 1, 2, 3]]))
    assert E.tolist() == [[0, 1], [0, 3], [1, 2], [2, 3]]


def test_simplex_edge_indices_round_trip():
    S = np.array([[0, 1, 2], [1, 2, 3], [2, 3, 4]])
    E = unique_edges(S)
    idx = simplex_edge_indices(S, E)
    assert idx.shape == (3, 3)
    for m, simplex in enumerate(S):
        for i in range(3):
            pair = sorted((simplex[i], simplex[(i + 1) % 3]))
            assert E[idx[m, i]].tolist() == pair


def test_simplex_edge_indices_accepts_unsorted_edges():
    S = np.array([[0, 1, 2]])
    E = np.array([[2, 0], [1, 0], [2, 1]])
    idx = simplex_edge_indices(S, E)
    assert idx[0].tolist() == [1, 2, 0]


def test_simplex_edge_indices_missing_edge_raises():
    S = np.array([[0, 1, 2]])
    with pytest.raises(ValueError):
        simplex_edge_indices(S, np.array([[0, 1], [1, 2]]))
