"""
step.py — Step Outcome & Snapshot
==================================
Every call to the cursor's `step()` returns a Step: a frozen picture of
where the run is and what the cursor saw at that cell.

    • outcome      – one of the five StepOutcome values
    • k, i, j      – pivot and cell under inspection
    • explanation  – plain-English "why" text for Learning Mode

Design decisions:
  - Step is a frozen dataclass.  The cursor is the only writer; the
    stepper, recorder and web layer are pure readers.
  - Paths are NOT stored on the Step.  Consumers ask the cursor for the
    path they want, from whichever generation they want, when they need it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class StepOutcome(Enum):
    NO_CHANGE              = "no_change"               # distance unchanged by this pivot
    NEW_PATH_ESTABLISHED   = "new_path_established"    # was ∞, now finite
    IMPROVED_PATH_PENDING  = "improved_path_pending"   # shorter path found; show the old one first
    IMPROVED_PATH_APPLIED  = "improved_path_applied"   # …now show the new one
    DONE                   = "done"                    # all pivots swept


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number : 1-based count of non-Done steps so far (Done repeats keep it).
        outcome     : Classification of the cell.
        k           : Pivot index, -1 before start, N when finished.
        i, j        : Cell (source, target) under inspection.
        explanation : Human-readable text for Learning Mode.
        is_final    : True iff outcome is DONE.
    """

    step_number:  int          = 0
    outcome:      StepOutcome  = StepOutcome.NO_CHANGE
    k:            int          = -1
    i:            int          = 0
    j:            int          = 0
    explanation:  str          = ""
    is_final:     bool         = False

    @property
    def indices(self):
        return self.k, self.i, self.j

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number": self.step_number,
            "outcome":     self.outcome.value,
            "k":           self.k,
            "i":           self.i,
            "j":           self.j,
            "explanation": self.explanation,
            "is_final":    self.is_final,
        }
