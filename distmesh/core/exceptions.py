"""Custom exception types for mesh generation."""

from __future__ import annotations

from typing import Optional


class DistMeshError(Exception):
    """Base class for domain-specific errors."""


class ConfigurationError(DistMeshError, ValueError):
    """Raised for unknown option names or out-of-range option values."""


class InvalidBoundingBoxError(DistMeshError, ValueError):
    """Raised when a bounding box is malformed or has no extent along an axis."""

    def __init__(self, message: str, *, dimension: Optional[int] = None) -> None:
        super().__init__(message)
        self.dimension = dimension


class DegenerateSamplingError(DistMeshError, RuntimeError):
    """Raised when the sampled point set cannot be triangulated.

    Either fewer than ``D + 1`` points survived sampling or Qhull rejected
    the point set (all points on a lower-dimensional subspace).
    """

    def __init__(
        self,
        message: str,
        *,
        point_count: Optional[int] = None,
        dimension: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.point_count = point_count
        self.dimension = dimension


class FieldEvaluationError(DistMeshError, ValueError):
    """Raised when a distance or size field returns an unusable result."""


__all__ = [
    "DistMeshError",
    "ConfigurationError",
    "InvalidBoundingBoxError",
    "DegenerateSamplingError",
    "FieldEvaluationError",
]
