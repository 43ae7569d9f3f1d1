"""
algorithms/ — Floyd–Warshall building blocks
=============================================

    from algorithms import run_one_iteration, reconstruct_path, path_weight
    from algorithms import Step, StepOutcome, PSEUDOCODE
"""

from algorithms.step           import Step, StepOutcome
from algorithms.floyd_warshall import (
    PSEUDOCODE,
    path_weight,
    reconstruct_path,
    run_one_iteration,
)

__all__ = [
    "Step",
    "StepOutcome",
    "PSEUDOCODE",
    "path_weight",
    "reconstruct_path",
    "run_one_iteration",
]
