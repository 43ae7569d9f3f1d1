import pytest

from graph import NO_EDGE, example_matrix
from engine import FloydCursor

INF = NO_EDGE


@pytest.fixture
def example_adjacency():
    """0→2 (-2), 1→0 (4), 1→2 (3), 2→3 (2), 3→1 (-1); zero diagonal."""
    return example_matrix()


@pytest.fixture
def sparse_adjacency():
    """Same edges as the example, every other entry (diagonal included) is no-edge."""
    return [
        [INF, INF, -2,  INF],
        [4,   INF, 3,   INF],
        [INF, INF, INF, 2],
        [INF, -1,  INF, INF],
    ]


@pytest.fixture
def cursor(example_adjacency):
    return FloydCursor(example_adjacency)


def drain(cursor):
    """Step until DONE; return every Step including the final one."""
    steps = []
    while True:
        step = cursor.step()
        steps.append(step)
        if step.is_final:
            return steps
