"""
cursor.py — Step Cursor
========================
The stepped Floyd–Warshall engine.  Each `step()` call moves a cursor
one cell through the (k, i, j) loops and reports what changed there.

Traversal order inside one pivot sweep:
    i = 0 … n-1, and for each i, j = n-1 … 0   (diagonal cells skipped)
When i runs off the end, the next pivot sweep runs and k increments.

State machine:
    AWAITING_NEXT_CELL           → step() advances, then classifies
    AWAITING_APPLY_CONFIRMATION  → step() stays on the cell, emits
                                   IMPROVED_PATH_APPLIED, goes back to
                                   AWAITING_NEXT_CELL
    FINISHED                     → step() returns DONE, nothing changes

Thread safety:
  Not thread-safe.  Drive it from one thread (or lock around it).
"""

import logging
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from graph import NO_EDGE, Generation, MatrixStore, format_weight
from algorithms.floyd_warshall import reconstruct_path, run_one_iteration
from algorithms.step import Step, StepOutcome

logger = logging.getLogger(__name__)


class CursorPhase(Enum):
    AWAITING_NEXT_CELL          = "awaiting_next_cell"
    AWAITING_APPLY_CONFIRMATION = "awaiting_apply_confirmation"
    FINISHED                    = "finished"


class FloydCursor:
    """
    Attributes:
        store        : The MatrixStore this cursor owns.
        k, i, j      : Current pivot and cell.
        phase        : Current CursorPhase.
        last_step    : Most recent Step returned (None before the first call).
        relaxations  : Total cells relaxed across all pivot sweeps so far.
    """

    def __init__(self, adjacency: Sequence[Sequence[Any]]):
        self.store:        MatrixStore    = MatrixStore(adjacency)
        n = self.store.n

        # first advance wraps to (0, n-1) and triggers pivot 0
        self.k:            int            = -1
        self.i:            int            = n - 1
        self.j:            int            = 0
        self.phase:        CursorPhase    = CursorPhase.AWAITING_NEXT_CELL
        self.last_step:    Optional[Step] = None
        self.relaxations:  int            = 0
        self._step_count:  int            = 0

        logger.info("Floyd cursor created for %d vertices", n)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def step(self) -> Step:
        if self.phase is CursorPhase.FINISHED:
            return self._emit(StepOutcome.DONE)

        if self.phase is CursorPhase.AWAITING_APPLY_CONFIRMATION:
            self.phase = CursorPhase.AWAITING_NEXT_CELL
            return self._emit(StepOutcome.IMPROVED_PATH_APPLIED)

        self._advance()
        while self.phase is not CursorPhase.FINISHED and self.i == self.j:
            self._advance()
        if self.phase is CursorPhase.FINISHED:
            return self._emit(StepOutcome.DONE)

        return self._emit(self._classify())

    def _advance(self) -> None:
        n = self.store.n
        self.j -= 1
        if self.j < 0:
            self.j = n - 1
            self.i += 1
        if self.i == n:
            self.i = 0
            self._next_pivot()

    def _next_pivot(self) -> None:
        self.k += 1
        if self.k == self.store.n:
            self.phase = CursorPhase.FINISHED
            logger.info("Floyd cursor finished after %d relaxation(s)", self.relaxations)
            return
        self.relaxations += run_one_iteration(self.store, self.k)

    def _classify(self) -> StepOutcome:
        after  = self.store.distance(self.i, self.j, Generation.AFTER)
        before = self.store.distance(self.i, self.j, Generation.BEFORE)
        if after < before:
            if before == NO_EDGE:
                return StepOutcome.NEW_PATH_ESTABLISHED
            self.phase = CursorPhase.AWAITING_APPLY_CONFIRMATION
            return StepOutcome.IMPROVED_PATH_PENDING
        return StepOutcome.NO_CHANGE

    def _emit(self, outcome: StepOutcome) -> Step:
        if outcome is not StepOutcome.DONE:
            self._step_count += 1
        step = Step(
            step_number=self._step_count,
            outcome=outcome,
            k=self.k,
            i=self.i,
            j=self.j,
            explanation=self._explain(outcome),
            is_final=outcome is StepOutcome.DONE,
        )
        self.last_step = step
        return step

    def _explain(self, outcome: StepOutcome) -> str:
        if outcome is StepOutcome.DONE:
            return f"All pairs computed after {self.store.n} pivot sweep(s)."

        k, i, j = self.k, self.i, self.j
        after  = format_weight(self.store.distance(i, j, Generation.AFTER))
        before = format_weight(self.store.distance(i, j, Generation.BEFORE))
        if outcome is StepOutcome.NEW_PATH_ESTABLISHED:
            return f"k = {k}: first path {i} → {j} found through {k}, weight {after}."
        if outcome is StepOutcome.IMPROVED_PATH_PENDING:
            return f"k = {k}: shorter path {i} → {j} through {k}: {after} < {before}. Old path shown."
        if outcome is StepOutcome.IMPROVED_PATH_APPLIED:
            return f"k = {k}: path {i} → {j} replaced, weight now {after}."
        return f"k = {k}: path {i} → {j} unchanged ({after})."

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def path(self, start: int, finish: int, use_before: bool = False) -> List[int]:
        generation = Generation.BEFORE if use_before else Generation.AFTER
        return reconstruct_path(self.store, start, finish, generation)

    def distance(self, start: int, finish: int, use_before: bool = False) -> float:
        self.store.check_vertex(start)
        self.store.check_vertex(finish)
        generation = Generation.BEFORE if use_before else Generation.AFTER
        return self.store.distance(start, finish, generation)

    def distance_rows(self, use_before: bool = False) -> List[List[float]]:
        return self.store.distance_rows(Generation.BEFORE if use_before else Generation.AFTER)

    def adjacency_rows(self) -> List[List[float]]:
        n, flat = self.store.n, self.store.adjacency
        return [list(flat[r * n:(r + 1) * n]) for r in range(n)]

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def vertex_count(self) -> int:
        return self.store.n

    @property
    def indices(self) -> Tuple[int, int, int]:
        return self.k, self.i, self.j

    @property
    def last_outcome(self) -> Optional[StepOutcome]:
        return self.last_step.outcome if self.last_step else None

    @property
    def is_done(self) -> bool:
        return self.phase is CursorPhase.FINISHED
