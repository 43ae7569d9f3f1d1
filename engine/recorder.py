"""
recorder.py — Run Recorder & Analytics
========================================
Drives a complete stepped run (all Steps), then computes the metrics an
analytics panel or a test wants to look at.

Usage:
    rec = Recorder()
    rec.start(adjacency)
    rec.run_to_completion()          # steps until DONE
    metrics = rec.get_metrics()
    rec.export()                     # serialisable snapshot for save/replay
"""

import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from graph import NO_EDGE
from algorithms.step import Step, StepOutcome
from engine.stepper import Stepper


# ---------------------------------------------------------------------------
# Metrics dataclass
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    vertex_count:    int   = 0
    total_steps:     int   = 0          # Steps returned, the final DONE included
    pivot_sweeps:    int   = 0
    no_change:       int   = 0
    new_paths:       int   = 0
    improved_paths:  int   = 0          # counted once per PENDING/APPLIED pair
    relaxations:     int   = 0          # cells rewritten by the relaxation passes
    reachable_pairs: int   = 0          # off-diagonal pairs with a finite final distance
    wall_time_ms:    float = 0.0


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps    : Full list of Steps from the run.
        metrics  : Computed RunMetrics (available after run_to_completion).
        stepper  : The underlying Stepper (for live path queries afterwards).
    """

    def __init__(self):
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None
        self.stepper: Optional[Stepper]    = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, adjacency: Sequence[Sequence[Any]]) -> None:
        self.stepper = Stepper()
        self.stepper.start(adjacency)
        self.steps   = []
        self.metrics = None

    def run_to_completion(self) -> RunMetrics:
        if self.stepper is None:
            raise RuntimeError("Call start() first.")

        start_time = time.monotonic()
        self.stepper.jump_to_end()
        wall_ms = (time.monotonic() - start_time) * 1000

        self.steps   = list(self.stepper.steps)
        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def events_for(self, i: int, j: int) -> List[Step]:
        """Every non-final Step that inspected cell (i, j)."""
        return [s for s in self.steps if not s.is_final and s.i == i and s.j == j]

    def export(self) -> Dict[str, Any]:
        cursor = self.stepper.cursor if self.stepper else None
        return {
            "metrics": asdict(self.metrics) if self.metrics else {},
            "steps":   [s.to_dict() for s in self.steps],
            "distances": [
                [v if v != NO_EDGE else "∞" for v in row]
                for row in cursor.distance_rows()
            ] if cursor else [],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        cursor = self.stepper.cursor
        n = cursor.vertex_count

        counts = {outcome: 0 for outcome in StepOutcome}
        for s in self.steps:
            counts[s.outcome] += 1

        distances = cursor.distance_rows()
        reachable = sum(
            1
            for s in range(n)
            for t in range(n)
            if s != t and distances[s][t] != NO_EDGE
        )

        return RunMetrics(
            vertex_count=n,
            total_steps=len(self.steps),
            pivot_sweeps=min(cursor.k, n),
            no_change=counts[StepOutcome.NO_CHANGE],
            new_paths=counts[StepOutcome.NEW_PATH_ESTABLISHED],
            improved_paths=counts[StepOutcome.IMPROVED_PATH_APPLIED],
            relaxations=cursor.relaxations,
            reachable_pairs=reachable,
            wall_time_ms=round(wall_ms, 2),
        )
