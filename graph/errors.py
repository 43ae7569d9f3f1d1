"""
errors.py — Error Hierarchy
===========================
Every failure the engine can surface derives from FloydError, so the
web layer can catch one type and map it to a 400.  Each class also
inherits the closest builtin so plain `except ValueError` still works.
"""


class FloydError(Exception):
    """Base class for all engine errors."""


class InvalidDimension(FloydError, ValueError):
    """Adjacency matrix is empty or not square."""


class InvalidVertex(FloydError, IndexError):
    """Vertex index outside [0, N)."""


class PathReconstructionOverrun(FloydError, RuntimeError):
    """Predecessor chain is longer than N hops (negative cycle?)."""


class MatrixFormatError(FloydError, ValueError):
    """Matrix text contains a token that is neither a number nor `inf`."""
