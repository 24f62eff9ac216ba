"""Configuration objects for the relaxation loop and the point sampler."""
from __future__ import annotations

import dataclasses
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_SEED,
    DELTA_T,
    GEOMETRY_EVALUATION_THRESHOLD,
    MAX_STEPS,
    POINTS_MOVEMENT_THRESHOLD,
    PRECISION,
    RETRIANGULATION_THRESHOLD,
)
from .exceptions import ConfigurationError

# camelCase spellings accepted by from_options()
_ALIASES: Dict[str, str] = {
    'maxSteps': 'max_steps',
    'retriangulationThreshold': 'retriangulation_threshold',
    'geometryEvaluationThreshold': 'geometry_evaluation_threshold',
    'pointsMovementThreshold': 'points_movement_threshold',
    'deltaT': 'delta_t',
    'logEvery': 'log_every',
}


@dataclass
class DistMeshConfig:
    """Tunable constants of one mesh generation run.

    Attributes
    ----------
    max_steps : int
        Iteration cap of the relaxation loop. Reaching it is not an error.
    retriangulation_threshold : float
        Fraction of h0; a point moving further than this since the last
        Delaunay triggers a new triangulation.
    geometry_evaluation_threshold : float
        Fraction of h0; simplices whose centroid has distance
        ``>= -threshold * h0`` are discarded.
    points_movement_threshold : float
        Fraction of h0; the run has converged when no point moved further
        than this during one step.
    delta_t : float
        Time step of the explicit force integration.
    precision : float
        Fraction of h0; grid points with distance ``>= precision * h0`` are
        rejected during sampling.
    seed : int or None
        Seed of the sampling generator. None draws fresh OS entropy.
    log_every : int
        Emit a DEBUG progress line every ``log_every`` steps (0 disables).
    """
    max_steps: int = MAX_STEPS
    retriangulation_threshold: float = RETRIANGULATION_THRESHOLD
    geometry_evaluation_threshold: float = GEOMETRY_EVALUATION_THRESHOLD
    points_movement_threshold: float = POINTS_MOVEMENT_THRESHOLD
    delta_t: float = DELTA_T
    precision: float = PRECISION
    seed: Optional[int] = DEFAULT_SEED
    log_every: int = 100

    @classmethod
    def option_names(cls):
        return tuple(f.name for f in dataclasses.fields(cls)) + tuple(_ALIASES)

    @classmethod
    def from_options(cls, base: Optional['DistMeshConfig'] = None, **options: Any) -> 'DistMeshConfig':
        """Build a config from keyword options on top of ``base`` (or defaults).

        Both snake_case field names and their camelCase spellings are
        recognized. Unknown names raise ConfigurationError.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        changes: Dict[str, Any] = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(
                    "Option %s with parameter %r not recognized" % (key, value))
            changes[name] = value
        cfg = dataclasses.replace(base if base is not None else cls(), **changes)
        cfg.validate()
        return cfg

    def replace(self, **changes: Any) -> 'DistMeshConfig':
        return self.from_options(self, **changes)

    def validate(self) -> None:
        if not isinstance(self.max_steps, numbers.Integral) or self.max_steps < 1:
            raise ConfigurationError(f"max_steps must be a positive integer, got {self.max_steps!r}")
        for name in ('retriangulation_threshold', 'geometry_evaluation_threshold',
                     'points_movement_threshold', 'delta_t'):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigurationError(f"{name} must be > 0, got {value!r}")
        if self.precision < 0:
            raise ConfigurationError(f"precision must be >= 0, got {self.precision!r}")
        if self.log_every < 0:
            raise ConfigurationError(f"log_every must be >= 0, got {self.log_every!r}")

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


__all__ = ['DistMeshConfig']
