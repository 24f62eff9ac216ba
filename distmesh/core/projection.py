"""Projection of points that left the domain back onto its boundary."""
from __future__ import annotations

import numpy as np

from .constants import EPS_GRADIENT, FD_STEP
from .fields import as_field
from .logging_utils import get_logger

logger = get_logger('distmesh.projection')

__all__ = ['distance_gradient', 'project_to_boundary']


def distance_gradient(distance, points, h0: float, values=None) -> np.ndarray:
    """Forward-difference gradient of a distance field at ``points``.

    The step is ``sqrt(machine eps) * h0`` along one axis at a time; the field
    is evaluated once per axis on the whole batch. ``values`` may pass the
    already known field values at ``points``.
    """
    fd = as_field(distance)
    pts = np.asarray(points, dtype=np.float64)
    d = fd(pts) if values is None else np.asarray(values, dtype=np.float64)
    step = FD_STEP * float(h0)
    grad = np.empty_like(pts)
    shifted = pts.copy()
    for k in range(pts.shape[1]):
        shifted[:, k] += step
        grad[:, k] = (fd(shifted) - d) / step
        shifted[:, k] = pts[:, k]
    return grad


def project_to_boundary(distance, h0: float, points: np.ndarray, n_fixed: int = 0) -> np.ndarray:
    """Move every point with positive distance onto the zero level set.

    One Newton step ``p -= d * grad / |grad|**2`` per outside point, exact to
    first order only. Points with ``d <= 0``, the first ``n_fixed`` rows and
    points where the gradient vanishes are left untouched. ``points`` is
    modified in place and returned.
    """
    fd = as_field(distance)
    if points.shape[0] <= n_fixed:
        return points
    movable = points[n_fixed:]
    d = fd(movable)
    outside = d > 0.0
    if not np.any(outside):
        return points
    idx = np.nonzero(outside)[0]
    sub = movable[idx]
    d_out = d[idx]
    grad = distance_gradient(fd, sub, h0, values=d_out)
    norm2 = np.einsum('ij,ij->i', grad, grad)
    ok = norm2 > EPS_GRADIENT
    if not np.all(ok):
        logger.debug('projection: %d point(s) with vanishing gradient left in place', int(np.count_nonzero(~ok)))
    sub[ok] -= (d_out[ok] / norm2[ok])[:, None] * grad[ok]
    movable[idx] = sub
    return points
