"""Force-equilibrium relaxation loop (the mesh generator proper).

Mesh edges act as repulsive springs between point masses. Every step the
spring forces are integrated with an explicit Euler step, points that left
the domain are projected back onto its boundary, and the Delaunay
triangulation is recomputed whenever some point has moved more than
``retriangulation_threshold * h0`` since the last one. The run stops when
no point moves more than ``points_movement_threshold * h0`` in one step, or
after ``max_steps`` steps (reported as ``converged=False``, not an error).

The first ``F`` rows of the point buffer are fixed points: they are never
displaced by forces nor by boundary projection.
"""
from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np
from numba import njit

from .array_utils import max_row_norm, select_indexed_rows, select_masked_rows
from .config import DistMeshConfig
from .constants import EPS_LENGTH, EPS_SUM, EPS_VOLUME, length_bias
from .edges import unique_edges
from .exceptions import ConfigurationError, DegenerateSamplingError
from .fields import as_field
from .geometry import edge_vectors, ensure_positive_orientation, simplex_centroids, simplex_volumes
from .logging_utils import get_logger
from .projection import project_to_boundary
from .sampling import as_fixed_points, bounding_box, sample_points, validate_bounding_box
from .stats import RelaxationStats
from .triangulation import delaunay

logger = get_logger('distmesh.relaxation')

__all__ = ['RelaxationResult', 'MeshRelaxer', 'bar_forces', 'relax', 'distmesh', 'bounding_box']


@njit(cache=True)
def _scatter_bar_forces(points, edges, forces, delta_t, n_fixed):
    """Add ``delta_t * force`` to the first endpoint of every edge and subtract
    it from the second, skipping endpoints inside the fixed prefix."""
    dim = points.shape[1]
    for e in range(edges.shape[0]):
        i = edges[e, 0]
        j = edges[e, 1]
        if i >= n_fixed:
            for k in range(dim):
                points[i, k] += delta_t * forces[e, k]
        if j >= n_fixed:
            for k in range(dim):
                points[j, k] -= delta_t * forces[e, k]


def bar_forces(points, edges, size) -> np.ndarray:
    """Repulsive spring force vector of every edge, shape (E, D).

    The desired length is ``h(midpoint) * bias * scale`` where ``scale``
    rescales the size field so that ``sum(L0**D)`` matches ``sum(L**D)``.
    Edges longer than desired carry no force.
    """
    pts = np.asarray(points, dtype=np.float64)
    E = np.asarray(edges, dtype=np.int64)
    dim = pts.shape[1]
    if E.size == 0:
        return np.empty((0, dim), dtype=np.float64)
    fh = as_field(size)
    vec = edge_vectors(pts, E)
    length = np.sqrt(np.einsum('ij,ij->i', vec, vec))
    midpoints = 0.5 * (select_indexed_rows(pts, E[:, 0]) + select_indexed_rows(pts, E[:, 1]))
    desired = fh(midpoints)
    denom = np.sum(desired ** dim)
    if denom > EPS_SUM:
        scale = (np.sum(length ** dim) / denom) ** (1.0 / dim)
    else:
        logger.debug('forces: size field sums to zero over %d edges; scale factor set to 1', E.shape[0])
        scale = 1.0
    target = desired * length_bias(dim) * scale
    safe_length = np.maximum(length, EPS_LENGTH)
    magnitude = np.maximum((target - safe_length) / safe_length, 0.0)
    return vec * magnitude[:, None]


@dataclass
class RelaxationResult:
    points: np.ndarray
    simplices: np.ndarray
    edges: np.ndarray
    converged: bool
    stats: RelaxationStats = field(default_factory=RelaxationStats)

    def __iter__(self) -> Iterator[np.ndarray]:
        # points, simplices = relax(...)
        yield self.points
        yield self.simplices


class MeshRelaxer:
    """Stateful form of the relaxation loop.

    Usage::

        relaxer = MeshRelaxer(fd, h0, fh, box, pfix)
        result = relaxer.run(initial_points)

    or, driving the loop by hand::

        relaxer.start(initial_points)
        while not relaxer.step() and relaxer.step_count < limit:
            inspect(relaxer.snapshot())

    The relaxer owns a single point buffer that is updated in place; all
    arrays handed out (``snapshot``, ``result``) are copies.
    """

    def __init__(self, distance, h0: float, size, box, fixed_points=None,
                 config: Optional[DistMeshConfig] = None):
        if not h0 > 0:
            raise ConfigurationError(f"h0 must be > 0, got {h0!r}")
        self.distance = as_field(distance)
        self.size = as_field(size)
        self.h0 = float(h0)
        self.box = validate_bounding_box(box)
        self.dimension = self.box.shape[0]
        self.fixed_points = as_fixed_points(fixed_points, self.dimension)
        self.n_fixed = self.fixed_points.shape[0]
        self.config = config if config is not None else DistMeshConfig()
        self.config.validate()
        self.points: Optional[np.ndarray] = None
        self.simplices = np.empty((0, self.dimension + 1), dtype=np.int64)
        self.edges = np.empty((0, 2), dtype=np.int64)
        self.step_count = 0
        self.converged = False
        self.stats = RelaxationStats()
        self._retriangulation_snapshot: Optional[np.ndarray] = None
        self._step_snapshot: Optional[np.ndarray] = None
        self._pending_simplices: Optional[np.ndarray] = None

    # -- lifecycle ---------------------------------------------------------

    def start(self, points, simplices=None) -> None:
        """Load the initial point set (fixed points first) and reset state.

        ``simplices`` may pass an already computed Delaunay triangulation of
        ``points``; it is used for the first retriangulation instead of
        calling Qhull again.
        """
        pts = np.array(points, dtype=np.float64, copy=True)
        if pts.ndim != 2 or pts.shape[1] != self.dimension:
            raise ValueError(f"points of shape {pts.shape} do not match a {self.dimension}D bounding box")
        if pts.shape[0] < self.n_fixed or not np.array_equal(pts[:self.n_fixed], self.fixed_points):
            raise ValueError("initial points must start with the fixed points")
        if pts.shape[0] < self.dimension + 1:
            raise DegenerateSamplingError(
                f"{pts.shape[0]} points cannot be triangulated in {self.dimension}D",
                point_count=pts.shape[0], dimension=self.dimension)
        self.points = pts
        # inf forces a retriangulation on the first step
        self._retriangulation_snapshot = np.full_like(pts, np.inf)
        self._step_snapshot = np.empty_like(pts)
        self._pending_simplices = None if simplices is None else np.asarray(simplices, dtype=np.int64)
        self.simplices = np.empty((0, self.dimension + 1), dtype=np.int64)
        self.edges = np.empty((0, 2), dtype=np.int64)
        self.step_count = 0
        self.converged = False
        self.stats = RelaxationStats()

    def snapshot(self) -> RelaxationResult:
        """Copy of the current state."""
        if self.points is None:
            raise RuntimeError("relaxer has not been started")
        return RelaxationResult(
            points=self.points.copy(),
            simplices=self.simplices.copy(),
            edges=self.edges.copy(),
            converged=self.converged,
            stats=dataclasses.replace(self.stats),
        )

    # -- one iteration -----------------------------------------------------

    def retriangulate(self) -> None:
        """Recompute simplices and edges from the current points.

        Simplices whose centroid is not safely inside the domain, or whose
        measure vanishes, are discarded; the remainder is positively
        oriented.
        """
        cfg = self.config
        if self._pending_simplices is not None:
            raw = self._pending_simplices
            self._pending_simplices = None
        else:
            raw = delaunay(self.points)
        centroids = simplex_centroids(self.points, raw)
        inside = self.distance(centroids) < -cfg.geometry_evaluation_threshold * self.h0
        kept = select_masked_rows(raw, inside)
        volumes = np.abs(simplex_volumes(self.points, kept))
        solid = volumes > EPS_VOLUME * self.h0 ** self.dimension
        n_degenerate = int(np.count_nonzero(~solid))
        kept = select_masked_rows(kept, solid)
        self.simplices = ensure_positive_orientation(self.points, kept)
        self.edges = unique_edges(self.simplices)
        self._retriangulation_snapshot[...] = self.points

        rejected = int(raw.shape[0] - inside.sum())
        self.stats.retriangulations += 1
        self.stats.rejected_simplices += rejected
        self.stats.degenerate_simplices += n_degenerate
        logger.debug('retriangulate(step=%d): simplices=%d rejected=%d degenerate=%d edges=%d',
                     self.step_count, self.simplices.shape[0], rejected, n_degenerate, self.edges.shape[0])
        if self.simplices.shape[0] == 0:
            logger.warning('retriangulate(step=%d): no simplex has its centroid inside the domain',
                           self.step_count)

    def step(self) -> bool:
        """Perform one relaxation step; return True when it converged."""
        if self.points is None:
            raise RuntimeError("relaxer has not been started")
        cfg = self.config
        h0 = self.h0

        if max_row_norm(self.points, self._retriangulation_snapshot) > cfg.retriangulation_threshold * h0:
            self.retriangulate()

        self._step_snapshot[...] = self.points
        if self.edges.shape[0]:
            forces = bar_forces(self.points, self.edges, self.size)
            _scatter_bar_forces(self.points, self.edges, forces, float(cfg.delta_t), int(self.n_fixed))
        project_to_boundary(self.distance, h0, self.points, n_fixed=self.n_fixed)

        movement = max_row_norm(self.points, self._step_snapshot)
        self.step_count += 1
        self.stats.steps = self.step_count
        self.stats.max_movement = movement
        if cfg.log_every and self.step_count % cfg.log_every == 0:
            logger.debug('step %d: max movement %.3e (%.3e h0)', self.step_count, movement, movement / h0)
        self.converged = movement < cfg.points_movement_threshold * h0
        return self.converged

    def run(self, points, simplices=None) -> RelaxationResult:
        """Relax ``points`` until convergence or ``max_steps``."""
        self.start(points, simplices)
        t0 = time.perf_counter()
        logger.info('relax: %d points (%d fixed) in %dD, h0=%g, max_steps=%d',
                    self.points.shape[0], self.n_fixed, self.dimension, self.h0, self.config.max_steps)
        while self.step_count < self.config.max_steps:
            if self.step():
                break
        self.stats.time_total = time.perf_counter() - t0
        if self.converged:
            logger.info('relax: converged after %d steps (%d retriangulations, %.3fs)',
                        self.stats.steps, self.stats.retriangulations, self.stats.time_total)
        else:
            logger.warning('relax: not converged after %d steps (last max movement %.3e, threshold %.3e)',
                           self.stats.steps, self.stats.max_movement,
                           self.config.points_movement_threshold * self.h0)
        return self.snapshot()


def _resolve_config(config: Optional[DistMeshConfig], options) -> DistMeshConfig:
    if options:
        return DistMeshConfig.from_options(config, **options)
    cfg = config if config is not None else DistMeshConfig()
    cfg.validate()
    return cfg


def relax(distance, h0: float, size, box, fixed_points=None, *, points=None,
          config: Optional[DistMeshConfig] = None, **options) -> RelaxationResult:
    """Generate a mesh and return the full RelaxationResult.

    Parameters
    ----------
    distance, size : ScalarField or vectorized callable
        Signed distance field of the domain and element size field.
    h0 : float
        Initial edge length (grid spacing of the sampler).
    box : array-like, shape (D, 2)
        Per-axis ``[min, max]`` of the sampling domain.
    fixed_points : array-like, shape (F, D), optional
        Points that never move; they are the first F rows of the result.
    points : array-like, shape (K, D), optional
        Initial movable points; sampled from the fields when omitted.
    config : DistMeshConfig, optional
        Run constants. Extra keyword ``options`` override its fields
        (``max_steps``, ``deltaT``, ``seed``, ...).

    Raises
    ------
    InvalidBoundingBoxError, DegenerateSamplingError, ConfigurationError
        Before any relaxation work is done.
    """
    cfg = _resolve_config(config, options)
    if not h0 > 0:
        raise ConfigurationError(f"h0 must be > 0, got {h0!r}")
    box = validate_bounding_box(box)
    dim = box.shape[0]
    pfix = as_fixed_points(fixed_points, dim)
    if points is None:
        initial = sample_points(distance, size, h0, box, pfix, precision=cfg.precision, seed=cfg.seed)
    else:
        movable = np.asarray(points, dtype=np.float64).reshape(-1, dim)
        initial = np.vstack((pfix, movable))
    if initial.shape[0] < dim + 1:
        raise DegenerateSamplingError(
            f"only {initial.shape[0]} points survived sampling; at least {dim + 1} are needed in {dim}D",
            point_count=initial.shape[0], dimension=dim)
    simplices = delaunay(initial)
    relaxer = MeshRelaxer(distance, h0, size, box, pfix, cfg)
    return relaxer.run(initial, simplices)


def distmesh(distance, h0: float, size, box, fixed_points=None, *,
             config: Optional[DistMeshConfig] = None, **options):
    """Generate a simplex mesh; return ``(points, simplices)``.

    See relax() for the parameters. Use relax() directly to obtain the
    convergence status and run statistics.
    """
    result = relax(distance, h0, size, box, fixed_points, config=config, **options)
    return result.points, result.simplices
