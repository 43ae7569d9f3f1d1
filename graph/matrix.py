"""
matrix.py — Matrix Store
========================
Owns the four N×N matrices the stepped Floyd–Warshall run works on:

    distance     × {before, after}
    predecessor  × {before, after}

plus the immutable adjacency matrix they were built from.

Design decisions:
  - One flat row-major list per matrix (`row * n + col`).  No per-row
    lists, no aliasing between generations: `snapshot()` copies values.
  - `NO_EDGE` is +∞.  It can never come out of summing finite weights,
    so it cannot collide with a real distance.
  - `NO_PREDECESSOR` is None, mirroring the next-hop matrix convention.
  - Only the `after` generation is writable (`relax`).  The `before`
    generation changes only through `snapshot()`.
"""

import math
from enum import Enum
from typing import Any, List, Optional, Sequence

from graph.errors import InvalidDimension, InvalidVertex, MatrixFormatError


NO_EDGE: float = float("inf")
NO_PREDECESSOR = None

# tokens accepted in place of NO_EDGE (JSON has no infinity)
NO_EDGE_ALIASES = ("inf", "+inf", "infinity", "∞", "-")


class Generation(Enum):
    BEFORE = "before"   # snapshot taken right before the latest pivot sweep
    AFTER  = "after"    # live values, including the latest pivot sweep


def coerce_weight(value: Any) -> float:
    """
    Turn one adjacency entry into a weight.  None, the NO_EDGE aliases and
    NO_EDGE itself mean "no edge"; every other weight must be finite.
    """
    if value is None:
        return NO_EDGE
    if isinstance(value, str):
        token = value.strip().lower()
        if token in NO_EDGE_ALIASES:
            return NO_EDGE
        try:
            weight = float(token) if any(c in token for c in ".e") else int(token)
        except ValueError:
            raise MatrixFormatError(f"Not a weight: {value!r}") from None
    elif isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MatrixFormatError(f"Not a weight: {value!r}")
    elif value == NO_EDGE:
        return NO_EDGE
    else:
        weight = value

    if isinstance(weight, float) and not math.isfinite(weight):
        raise MatrixFormatError(f"Weight must be finite: {value!r}")
    return weight


def format_weight(value: float) -> str:
    return "∞" if value == NO_EDGE else f"{value:g}"


class MatrixStore:
    """
    Attributes:
        n          : Vertex count (all matrices are n×n).
        adjacency  : Flat tuple of the input weights (never mutated).
    """

    def __init__(self, adjacency: Sequence[Sequence[Any]]):
        rows = [list(r) for r in adjacency] if adjacency is not None else []
        n = len(rows)
        if n <= 0:
            raise InvalidDimension("Adjacency matrix must have at least one vertex.")
        for r, row in enumerate(rows):
            if len(row) != n:
                raise InvalidDimension(
                    f"Adjacency matrix is not square: row {r} has {len(row)} "
                    f"entries, expected {n}."
                )

        self.n:         int               = n
        self.adjacency: tuple             = tuple(coerce_weight(v) for row in rows for v in row)

        after_dist: List[float] = list(self.adjacency)
        after_pred: List[Optional[int]] = [
            NO_PREDECESSOR if after_dist[s * n + t] == NO_EDGE else s
            for s in range(n)
            for t in range(n)
        ]

        self._dist = {Generation.AFTER: after_dist, Generation.BEFORE: list(after_dist)}
        self._pred = {Generation.AFTER: after_pred, Generation.BEFORE: list(after_pred)}

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------
    def index(self, row: int, col: int) -> int:
        return row * self.n + col

    def check_vertex(self, v: int) -> int:
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v < self.n:
            raise InvalidVertex(f"Vertex {v!r} out of range [0, {self.n}).")
        return v

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    def weight(self, s: int, t: int) -> float:
        return self.adjacency[self.index(s, t)]

    def distance(self, s: int, t: int, generation: Generation = Generation.AFTER) -> float:
        return self._dist[generation][self.index(s, t)]

    def predecessor(self, s: int, t: int, generation: Generation = Generation.AFTER) -> Optional[int]:
        return self._pred[generation][self.index(s, t)]

    def distance_rows(self, generation: Generation = Generation.AFTER) -> List[List[float]]:
        """Copy of one distance generation as a list of rows."""
        flat, n = self._dist[generation], self.n
        return [flat[r * n:(r + 1) * n] for r in range(n)]

    def predecessor_rows(self, generation: Generation = Generation.AFTER) -> List[List[Optional[int]]]:
        flat, n = self._pred[generation], self.n
        return [flat[r * n:(r + 1) * n] for r in range(n)]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def relax(self, s: int, t: int, distance: float, predecessor: int) -> None:
        """Overwrite one cell of the `after` generation."""
        idx = self.index(s, t)
        self._dist[Generation.AFTER][idx] = distance
        self._pred[Generation.AFTER][idx] = predecessor

    def snapshot(self) -> None:
        """Copy the `after` generation into `before` (values, not references)."""
        self._dist[Generation.BEFORE][:] = self._dist[Generation.AFTER]
        self._pred[Generation.BEFORE][:] = self._pred[Generation.AFTER]

    def __repr__(self) -> str:
        return f"MatrixStore(n={self.n})"
