"""
loader.py — Adjacency Matrix Text Format
=========================================
Reads and writes the plain-text matrix format:

    4                 ← optional: vertex count on its own line
    0   inf -2  inf
    4   0   3   inf
    inf inf 0   2
    inf -1  inf 0

Rules:
  - Tokens are separated by whitespace and/or commas.
  - `inf`, `∞` and `-` mean "no edge"; anything else must be a number.
  - Blank lines and lines starting with `#` are ignored.
  - A leading single-token line is treated as the vertex count only when
    it is followed by exactly that many rows; otherwise it is row 0 of a
    1×1 matrix.
"""

from pathlib import Path
from typing import Any, List, Sequence, Union

from graph.errors import InvalidDimension
from graph.matrix import NO_EDGE, coerce_weight, format_weight


# ---------------------------------------------------------------------------
# Example graph: 0→2 (-2), 1→0 (4), 1→2 (3), 2→3 (2), 3→1 (-1)
# ---------------------------------------------------------------------------
EXAMPLE_TEXT = """\
4
0   inf -2  inf
4   0   3   inf
inf inf 0   2
inf -1  inf 0
"""


def example_matrix() -> List[List[float]]:
    return parse_adjacency_matrix(EXAMPLE_TEXT)


def parse_adjacency_matrix(text: str) -> List[List[float]]:
    rows_raw = [
        line.strip()
        for line in text.strip().splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not rows_raw:
        raise InvalidDimension("Matrix text is empty.")

    tokens = [row.replace(",", " ").split() for row in rows_raw]

    # optional vertex-count header
    if len(tokens[0]) == 1 and len(tokens) > 1:
        header = tokens[0][0]
        if not (header.isascii() and header.isdigit()):
            raise InvalidDimension(f"Vertex count header must be a positive integer, got {header!r}.")
        declared = int(header)
        tokens = tokens[1:]
        if declared != len(tokens):
            raise InvalidDimension(f"Header declares {declared} vertices but {len(tokens)} rows follow.")

    n = len(tokens)
    matrix: List[List[float]] = []
    for r, row in enumerate(tokens):
        if len(row) != n:
            raise InvalidDimension(f"Row {r} has {len(row)} entries, expected {n}.")
        matrix.append([coerce_weight(t) for t in row])
    return matrix


def load_adjacency_matrix(path: Union[str, Path]) -> List[List[float]]:
    return parse_adjacency_matrix(Path(path).read_text(encoding="utf-8"))


def format_adjacency_matrix(rows: Sequence[Sequence[Any]], header: bool = True) -> str:
    """Inverse of parse_adjacency_matrix (no-edge written as `inf`)."""
    lines = [str(len(rows))] if header else []
    for row in rows:
        cells = ["inf" if coerce_weight(v) == NO_EDGE else format_weight(coerce_weight(v)) for v in row]
        lines.append(" ".join(cells))
    return "\n".join(lines) + "\n"
