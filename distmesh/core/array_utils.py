"""Small generic row gather / filter helpers shared by the mesh modules."""
from __future__ import annotations

import numpy as np


def select_indexed_rows(array, indices) -> np.ndarray:
    """Return ``array[indices]`` as a new array, rows gathered by integer index.

    ``indices`` may be any integer array; the result has shape
    ``indices.shape + array.shape[1:]``.
    """
    arr = np.asarray(array)
    idx = np.asarray(indices, dtype=np.intp)
    if idx.size and (idx.min() < 0 or idx.max() >= arr.shape[0]):
        raise IndexError(f"row index out of range for array with {arr.shape[0]} rows")
    return arr[idx]


def select_masked_rows(array, mask) -> np.ndarray:
    """Return the rows of ``array`` where the boolean ``mask`` is True."""
    arr = np.asarray(array)
    m = np.asarray(mask, dtype=bool).reshape(-1)
    if m.shape[0] != arr.shape[0]:
        raise ValueError(f"mask length {m.shape[0]} does not match {arr.shape[0]} rows")
    return arr[m]


def max_row_norm(a, b) -> float:
    """Largest Euclidean distance between corresponding rows of ``a`` and ``b``."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    if diff.size == 0:
        return 0.0
    return float(np.sqrt(np.einsum('ij,ij->i', diff, diff)).max())


__all__ = ['select_indexed_rows', 'select_masked_rows', 'max_row_norm']
