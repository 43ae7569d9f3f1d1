"""
engine/
-------
Stepping, playback & recording layer.

    from engine import FloydCursor, Stepper, Recorder
"""

from engine.cursor   import FloydCursor, CursorPhase
from engine.stepper  import Stepper, StepperState, Highlight, SPEED_PRESETS, DWELL_TIMES
from engine.recorder import Recorder, RunMetrics

__all__ = [
    "FloydCursor",
    "CursorPhase",
    "Stepper",
    "StepperState",
    "Highlight",
    "SPEED_PRESETS",
    "DWELL_TIMES",
    "Recorder",
    "RunMetrics",
]
