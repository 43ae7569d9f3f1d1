"""
floyd_warshall.py — Floyd–Warshall Relaxation & Path Reconstruction
=====================================================================
The algorithmic half of the stepped run.  The cursor (engine/cursor.py)
decides WHEN a pivot sweep happens; this module decides WHAT it does.

Structure of one pivot sweep:
  before ← after
  for i in nodes:
      for j in nodes:
          if dist[i][k] + dist[k][j] < dist[i][j]:
              dist[i][j] = dist[i][k] + dist[k][j]
              pred[i][j] = pred[k][j]

Path reconstruction walks the predecessor chain backwards from the
target, bounded by N hops, instead of recursing.
"""

import logging
from typing import List, Sequence

from graph import (
    NO_EDGE,
    NO_PREDECESSOR,
    Generation,
    MatrixStore,
    PathReconstructionOverrun,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def FloydWarshall(graph):",                     # 0
    "    dist ← adjacency matrix",                   # 1
    "    pred ← s where an edge s→t exists",         # 2
    "    for k in 0 … n-1:",                         # 3
    "        before ← after",                        # 4
    "        for i in 0 … n-1:",                     # 5
    "            for j in 0 … n-1:",                 # 6
    "                if dist[i][k]+dist[k][j]",      # 7
    "                      < dist[i][j]:",           # 8
    "                    dist[i][j] = …",            # 9
    "                    pred[i][j] = pred[k][j]",   # 10
    "    return dist, pred",                         # 11
]


# ---------------------------------------------------------------------------
# Iteration Engine
# ---------------------------------------------------------------------------
def run_one_iteration(store: MatrixStore, k: int) -> int:
    """
    Snapshot `after` into `before`, then relax every (i, j) through pivot k.
    Returns the number of cells that were relaxed.
    """
    n = store.n
    store.snapshot()

    updates = 0
    for i in range(n):
        d_ik = store.distance(i, k)
        # sentinel operands are skipped, never summed
        if d_ik == NO_EDGE:
            continue
        for j in range(n):
            d_kj = store.distance(k, j)
            if d_kj == NO_EDGE:
                continue
            candidate = d_ik + d_kj
            if candidate < store.distance(i, j):
                store.relax(i, j, candidate, store.predecessor(k, j))
                updates += 1

    logger.debug("pivot %d: %d relaxation(s)", k, updates)
    return updates


# ---------------------------------------------------------------------------
# Path Reconstructor
# ---------------------------------------------------------------------------
def reconstruct_path(
    store: MatrixStore,
    start: int,
    finish: int,
    generation: Generation = Generation.AFTER,
) -> List[int]:
    """
    Ordered vertices of the shortest known path start → finish in the
    chosen generation.  `[start]` when start == finish, `[]` when no path
    is known.  Raises PathReconstructionOverrun if the chain runs past
    N hops without reaching `start`.
    """
    store.check_vertex(start)
    store.check_vertex(finish)

    if start == finish:
        return [start]
    if store.predecessor(start, finish, generation) is NO_PREDECESSOR:
        return []

    path = [finish]
    current = finish
    for _ in range(store.n):
        current = store.predecessor(start, current, generation)
        if current is NO_PREDECESSOR:
            return []
        path.append(current)
        if current == start:
            path.reverse()
            return path

    logger.debug("predecessor chain %d → %d exceeded %d hops", start, finish, store.n)
    raise PathReconstructionOverrun(
        f"Predecessor chain from {start} to {finish} exceeds {store.n} hops; "
        f"the graph probably contains a negative cycle."
    )


def path_weight(adjacency: Sequence[Sequence[float]], path: Sequence[int]) -> float:
    """Sum of edge weights along `path` (0 for a single vertex, ∞ if an edge is missing)."""
    total: float = 0
    for a, b in zip(path, path[1:]):
        w = adjacency[a][b]
        if w == NO_EDGE:
            return NO_EDGE
        total += w
    return total
