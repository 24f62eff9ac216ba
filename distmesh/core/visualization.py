"""Plotting helpers for 2D meshes."""
from __future__ import annotations

import os as _os
import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from .boundary import bound_edges
from .logging_utils import get_logger

logger = get_logger('distmesh.viz')

__all__ = ['plot_mesh']


def plot_mesh(points, simplices, outname=None, boundary=True, ax=None, title=None):
    """Draw a triangle mesh, optionally highlighting its boundary edges.

    Args:
        points: (N, 2) coordinates
        simplices: (M, 3) triangles
        outname: image path; the figure is saved and closed when given
        boundary: overlay the boundary edges returned by bound_edges()
        ax: existing matplotlib Axes to draw into
        title: optional axes title

    Returns the Axes (closed figure's Axes when ``outname`` is given).
    """
    pts = np.asarray(points, dtype=np.float64)
    tris = np.asarray(simplices, dtype=np.int64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("plot_mesh supports 2D meshes only")
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure
    if tris.size:
        ax.triplot(pts[:, 0], pts[:, 1], tris, lw=0.6, color=(0.2, 0.3, 0.6))
    # scale markers by vertex count
    s = max(0.6, min(8.0, 200.0 / float(max(1, pts.shape[0]))))
    ax.scatter(pts[:, 0], pts[:, 1], s=s, color='black', zorder=3)
    if boundary and tris.size:
        segments = pts[bound_edges(pts, tris).oriented()]
        ax.add_collection(LineCollection(segments, colors=(0.85, 0.2, 0.2), linewidths=1.6, zorder=2))
    ax.set_aspect('equal')
    if title:
        ax.set_title(title)
    if outname:
        fig.savefig(outname, dpi=150)
        plt.close(fig)
        logger.debug('plot_mesh: wrote %s', outname)
    return ax
