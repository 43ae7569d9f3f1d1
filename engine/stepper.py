"""
stepper.py — Playback Driver
=============================
The Stepper is the object a UI drives during a run.  It owns a
FloydCursor, buffers every Step it has seen, and paces auto-play with a
dwell time that depends on what the last step showed: an unchanged cell
flashes by, an improved path stays up long enough to compare old and new.

State machine:
    IDLE  →  start()  →  PAUSED
    PAUSED  →  play()   →  PLAYING
    PLAYING →  pause()  →  PAUSED
    PLAYING →  (cursor done) → FINISHED
    any     →  reset()  →  IDLE

Thread safety:
  Not thread-safe, same as the cursor underneath.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from algorithms.step import Step, StepOutcome
from engine.cursor import FloydCursor


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------
# seconds the result of a step stays on screen before the next one
DWELL_TIMES: Dict[StepOutcome, float] = {
    StepOutcome.NO_CHANGE:             0.2,
    StepOutcome.NEW_PATH_ESTABLISHED:  1.0,
    StepOutcome.IMPROVED_PATH_PENDING: 2.0,
    StepOutcome.IMPROVED_PATH_APPLIED: 2.0,
    StepOutcome.DONE:                  0.0,
}

# multipliers applied to DWELL_TIMES
SPEED_PRESETS = {
    "slow":   2.0,    # teaching mode
    "medium": 1.0,
    "fast":   0.4,
    "turbo":  0.1,    # demo mode
}

MIN_SPEED_FACTOR = 0.05


# ---------------------------------------------------------------------------
# What a renderer should draw for the current step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Highlight:
    tone:     Optional[str]          = None   # "inferior" | "improved" | "new" | "inspect"
    vertices: List[int]              = field(default_factory=list)
    edges:    List[Tuple[int, int]]  = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tone":     self.tone,
            "vertices": list(self.vertices),
            "edges":    [list(e) for e in self.edges],
        }


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state   : Current StepperState.
        cursor  : The FloydCursor being driven (None while IDLE).
        steps   : Every Step returned so far.
        speed   : Multiplier on DWELL_TIMES.
        on_step : Optional callback(Step) fired after every step.
    """

    def __init__(self, on_step: Optional[Callable[[Step], None]] = None):
        self.cursor:   Optional[FloydCursor] = None
        self.steps:    List[Step]            = []
        self.state:    StepperState          = StepperState.IDLE
        self.speed:    float                 = SPEED_PRESETS["medium"]
        self.on_step:  Optional[Callable[[Step], None]] = on_step

        self._adjacency: Optional[List[List[Any]]] = None
        self._last_tick: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, adjacency: Sequence[Sequence[Any]]) -> None:
        """Build a fresh cursor for `adjacency`.  No step is taken yet."""
        cursor = FloydCursor(adjacency)
        self._adjacency = cursor.adjacency_rows()
        self.cursor     = cursor
        self.steps      = []
        self.state      = StepperState.PAUSED

    def restart(self) -> None:
        """Start over on the same adjacency matrix."""
        if self._adjacency is None:
            raise RuntimeError("Call start() first.")
        self.start(self._adjacency)

    def reset(self) -> None:
        """Back to IDLE — caller must call start() again."""
        self.cursor     = None
        self._adjacency = None
        self.steps      = []
        self.state      = StepperState.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> bool:
        """Advance one step.  Returns False once the cursor reports DONE."""
        if self.cursor is None:
            raise RuntimeError("Call start() first.")
        if self.state == StepperState.FINISHED:
            return False

        step = self.cursor.step()
        self.steps.append(step)
        self._notify(step)
        if step.is_final:
            self.state = StepperState.FINISHED
            return False
        return True

    def jump_to_end(self) -> None:
        """Step until DONE."""
        while self.next_step():
            pass

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state in (StepperState.FINISHED, StepperState.IDLE):
            return
        self.state      = StepperState.PLAYING
        self._last_tick = time.monotonic()

    def pause(self) -> None:
        if self.state == StepperState.PLAYING:
            self.state = StepperState.PAUSED

    def toggle_play(self) -> None:
        if self.state == StepperState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> bool:
        """
        Call periodically (e.g. every 50 ms).  If playing and the current
        step has been shown for its dwell time, advances one step.
        Returns True if a step was taken.
        """
        if self.state != StepperState.PLAYING:
            return False
        now = time.monotonic() if now is None else now
        if now - self._last_tick < self.current_dwell:
            return False
        self._last_tick = now
        self.next_step()
        return True

    @property
    def current_dwell(self) -> float:
        """Seconds the current step should stay on screen."""
        if not self.steps:
            return 0.0
        return DWELL_TIMES[self.steps[-1].outcome] * self.speed

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.speed = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_speed_value(self, factor: float) -> None:
        self.speed = max(MIN_SPEED_FACTOR, factor)

    # ------------------------------------------------------------------
    # Rendering hints
    # ------------------------------------------------------------------
    def highlight(self) -> Highlight:
        """Vertices/edges to draw for the current step, and in which tone."""
        step = self.current_step
        if step is None or self.cursor is None:
            return Highlight()

        if step.outcome is StepOutcome.NO_CHANGE:
            return Highlight(tone="inspect", vertices=[step.i, step.j])
        if step.outcome is StepOutcome.IMPROVED_PATH_PENDING:
            return _path_highlight("inferior", self.cursor.path(step.i, step.j, use_before=True))
        if step.outcome is StepOutcome.IMPROVED_PATH_APPLIED:
            return _path_highlight("improved", self.cursor.path(step.i, step.j))
        if step.outcome is StepOutcome.NEW_PATH_ESTABLISHED:
            return _path_highlight("new", self.cursor.path(step.i, step.j))
        return Highlight()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        return self.steps[-1] if self.steps else None

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def is_finished(self) -> bool:
        return self.state == StepperState.FINISHED

    @property
    def is_playing(self) -> bool:
        return self.state == StepperState.PLAYING

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _notify(self, step: Step) -> None:
        if self.on_step:
            self.on_step(step)


def _path_highlight(tone: str, path: List[int]) -> Highlight:
    return Highlight(tone=tone, vertices=list(path), edges=list(zip(path, path[1:])))
