"""Relaxation run statistics and presentation utilities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class RelaxationStats:
    steps: int = 0
    retriangulations: int = 0
    rejected_simplices: int = 0     # centroid outside the domain, summed over retriangulations
    degenerate_simplices: int = 0   # zero measure, summed over retriangulations
    max_movement: float = 0.0       # largest point displacement of the last step
    time_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'steps': self.steps,
            'retriangulations': self.retriangulations,
            'rejected_simplices': self.rejected_simplices,
            'degenerate_simplices': self.degenerate_simplices,
            'max_movement': self.max_movement,
            'time_total': self.time_total,
            'time_per_step': (self.time_total / self.steps) if self.steps else 0.0,
        }


def format_stats_table(stats) -> str:
    """Return a human readable two-column table of a stats object or dict."""
    values = stats.to_dict() if hasattr(stats, 'to_dict') else dict(stats)
    if not values:
        return "<no stats>"
    rows = []
    for key, val in values.items():
        if isinstance(val, float):
            rows.append((key, f"{val:.6g}"))
        else:
            rows.append((key, str(val)))
    w0 = max(len("stat"), max(len(r[0]) for r in rows))
    w1 = max(len("value"), max(len(r[1]) for r in rows))
    lines = [f"{'stat'.ljust(w0)} {'value'.rjust(w1)}", "-" * (w0 + w1 + 1)]
    lines += [f"{k.ljust(w0)} {v.rjust(w1)}" for k, v in rows]
    return "\n".join(lines)


__all__ = ["RelaxationStats", "format_stats_table"]
