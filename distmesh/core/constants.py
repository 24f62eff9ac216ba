"""Central numerical tolerances and algorithm constants.

This module centralizes the tuning constants of the relaxation loop and the
tiny numeric thresholds used to guard divisions, so they can be tuned
consistently and referenced without scattering literals.
"""
from __future__ import annotations

import numpy as np

# Algorithm defaults (fractions are relative to the initial edge length h0)
MAX_STEPS: int = 10000                        # iteration cap of the relaxation loop
RETRIANGULATION_THRESHOLD: float = 0.1        # max move that triggers a new Delaunay
GEOMETRY_EVALUATION_THRESHOLD: float = 1e-3   # centroid band for simplex rejection
POINTS_MOVEMENT_THRESHOLD: float = 1e-3       # max move of a converged step
DELTA_T: float = 0.2                          # explicit Euler time step
PRECISION: float = 1e-3                       # sampling tolerance band
DEFAULT_SEED: int = 0

# Length bias of the spring model: L0 = h(x) * (1 + 0.4 / 2**(D-1)) * scale
LENGTH_BIAS_NUMERATOR: float = 0.4

# Guards
EPS_LENGTH: float = 1e-12         # minimum edge length used as a divisor
EPS_GRADIENT: float = 1e-24       # minimum squared gradient norm for projection
EPS_VOLUME: float = 1e-12         # relative (× h0**D) measure of a degenerate simplex
EPS_SUM: float = 1e-300           # denominator floor of the density scale factor

# Forward-difference step of the boundary projection is FD_STEP * h0
FD_STEP: float = float(np.sqrt(np.finfo(np.float64).eps))


def length_bias(dimension: int) -> float:
    """Return the constant ``1 + 0.4 / 2**(D-1)`` for a D-dimensional mesh."""
    return 1.0 + LENGTH_BIAS_NUMERATOR / 2.0 ** (dimension - 1)


__all__ = [
    'MAX_STEPS',
    'RETRIANGULATION_THRESHOLD',
    'GEOMETRY_EVALUATION_THRESHOLD',
    'POINTS_MOVEMENT_THRESHOLD',
    'DELTA_T',
    'PRECISION',
    'DEFAULT_SEED',
    'LENGTH_BIAS_NUMERATOR',
    'EPS_LENGTH',
    'EPS_GRADIENT',
    'EPS_VOLUME',
    'EPS_SUM',
    'FD_STEP',
    'length_bias',
]
