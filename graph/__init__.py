"""
graph/
-----
Data layer.  Public API:

    from graph import MatrixStore, Generation, NO_EDGE, NO_PREDECESSOR
    from graph import parse_adjacency_matrix, load_adjacency_matrix, example_matrix
    from graph import FloydError, InvalidDimension, InvalidVertex, …
"""

from graph.errors import (
    FloydError,
    InvalidDimension,
    InvalidVertex,
    MatrixFormatError,
    PathReconstructionOverrun,
)
from graph.matrix import (
    NO_EDGE,
    NO_PREDECESSOR,
    Generation,
    MatrixStore,
    coerce_weight,
    format_weight,
)
from graph.loader import (
    EXAMPLE_TEXT,
    example_matrix,
    format_adjacency_matrix,
    load_adjacency_matrix,
    parse_adjacency_matrix,
)

__all__ = [
    "FloydError",     "InvalidDimension",  "InvalidVertex",
    "MatrixFormatError", "PathReconstructionOverrun",
    "NO_EDGE",        "NO_PREDECESSOR",    "Generation",
    "MatrixStore",    "coerce_weight",     "format_weight",
    "EXAMPLE_TEXT",   "example_matrix",    "format_adjacency_matrix",
    "load_adjacency_matrix", "parse_adjacency_matrix",
]
