import pytest

from graph import NO_EDGE, InvalidDimension, InvalidVertex
from algorithms import StepOutcome
from engine import CursorPhase, FloydCursor

from conftest import drain

INF = NO_EDGE


def test_initial_state(cursor):
    assert cursor.indices == (-1, 3, 0)
    assert cursor.phase is CursorPhase.AWAITING_NEXT_CELL
    assert cursor.last_outcome is None
    assert cursor.distance_rows(use_before=True) == cursor.distance_rows()


def test_construction_fails_on_bad_matrix():
    with pytest.raises(InvalidDimension):
        FloydCursor([[0, 1]])


def test_first_sweep_order_and_two_phase_improvement(cursor):
    seen = [cursor.step() for _ in range(7)]
    assert [s.indices for s in seen] == [
        (0, 0, 3), (0, 0, 2), (0, 0, 1),
        (0, 1, 3), (0, 1, 2), (0, 1, 2),
        (0, 1, 0),
    ]
    assert [s.outcome for s in seen] == [
        StepOutcome.NO_CHANGE, StepOutcome.NO_CHANGE, StepOutcome.NO_CHANGE,
        StepOutcome.NO_CHANGE,
        StepOutcome.IMPROVED_PATH_PENDING, StepOutcome.IMPROVED_PATH_APPLIED,
        StepOutcome.NO_CHANGE,
    ]
    assert [s.step_number for s in seen] == list(range(1, 8))


def test_pending_phase_paths(cursor):
    for _ in range(5):
        step = cursor.step()
    assert step.outcome is StepOutcome.IMPROVED_PATH_PENDING
    assert cursor.phase is CursorPhase.AWAITING_APPLY_CONFIRMATION
    assert cursor.path(1, 2, use_before=True) == [1, 2]
    assert cursor.path(1, 2) == [1, 0, 2]

    assert cursor.step().outcome is StepOutcome.IMPROVED_PATH_APPLIED
    assert cursor.phase is CursorPhase.AWAITING_NEXT_CELL


def test_pending_always_followed_by_applied_on_same_cell(example_adjacency, sparse_adjacency):
    for adjacency in (example_adjacency, sparse_adjacency):
        steps = drain(FloydCursor(adjacency))
        for prev, nxt in zip(steps, steps[1:]):
            if prev.outcome is StepOutcome.IMPROVED_PATH_PENDING:
                assert nxt.outcome is StepOutcome.IMPROVED_PATH_APPLIED
                assert nxt.indices == prev.indices


def test_distances_never_increase_per_step(sparse_adjacency):
    cursor = FloydCursor(sparse_adjacency)
    while not cursor.step().is_final:
        assert cursor.distance(cursor.i, cursor.j) <= cursor.distance(cursor.i, cursor.j, use_before=True)
        for s in range(4):
            for t in range(4):
                assert cursor.distance(s, t) <= cursor.distance(s, t, use_before=True)


def test_diagonal_cells_are_never_reported(cursor):
    assert all(s.i != s.j for s in drain(cursor)[:-1])


def test_outcome_counts_for_example(cursor):
    steps = drain(cursor)
    outcomes = [s.outcome for s in steps]
    assert len(steps) == 50
    assert outcomes.count(StepOutcome.NO_CHANGE) == 40
    assert outcomes.count(StepOutcome.NEW_PATH_ESTABLISHED) == 7
    assert outcomes.count(StepOutcome.IMPROVED_PATH_PENDING) == 1
    assert outcomes.count(StepOutcome.IMPROVED_PATH_APPLIED) == 1
    assert outcomes[-1] is StepOutcome.DONE
    assert cursor.relaxations == 8


def test_end_to_end_sparse_example(sparse_adjacency):
    cursor = FloydCursor(sparse_adjacency)
    steps = drain(cursor)

    assert cursor.k == cursor.vertex_count == 4
    assert cursor.is_done
    assert cursor.path(0, 3) == [0, 2, 3]
    assert cursor.distance(0, 3) == 0

    events = [s for s in steps if (s.i, s.j) == (0, 3) and not s.is_final]
    new = [s for s in events if s.outcome is StepOutcome.NEW_PATH_ESTABLISHED]
    assert len(new) == 1
    assert new[0].k == 2


def test_path_non_empty_iff_reachable(sparse_adjacency):
    cursor = FloydCursor(sparse_adjacency)
    for _ in range(20):
        cursor.step()
    for s in range(4):
        for t in range(4):
            if s != t:
                assert bool(cursor.path(s, t)) == (cursor.distance(s, t) != NO_EDGE)


def test_done_is_idempotent(cursor):
    drain(cursor)
    snapshot = (cursor.indices, cursor.distance_rows(), cursor.distance_rows(use_before=True))
    final = cursor.last_step
    for _ in range(3):
        step = cursor.step()
        assert step == final
        assert step.outcome is StepOutcome.DONE
    assert (cursor.indices, cursor.distance_rows(), cursor.distance_rows(use_before=True)) == snapshot


def test_two_isolated_vertices():
    cursor = FloydCursor([[INF, INF], [INF, INF]])
    steps = drain(cursor)
    assert [s.outcome for s in steps] == [StepOutcome.NO_CHANGE] * 4 + [StepOutcome.DONE]
    assert [(s.i, s.j) for s in steps[:-1]] == [(0, 1), (1, 0), (0, 1), (1, 0)]
    for use_before in (False, True):
        assert cursor.path(0, 1, use_before) == []
        assert cursor.path(1, 0, use_before) == []


def test_single_vertex_is_done_immediately():
    cursor = FloydCursor([[0]])
    step = cursor.step()
    assert step.outcome is StepOutcome.DONE
    assert step.step_number == 0
    assert cursor.k == 1
    assert cursor.path(0, 0) == [0]
    assert cursor.path(0, 0, use_before=True) == [0]


def test_path_query_rejects_out_of_range(cursor):
    with pytest.raises(InvalidVertex):
        cursor.path(0, 4)
    with pytest.raises(InvalidVertex):
        cursor.distance(7, 0)


def test_explanations_mention_cell(cursor):
    steps = drain(cursor)
    pending = next(s for s in steps if s.outcome is StepOutcome.IMPROVED_PATH_PENDING)
    assert "1 → 2" in pending.explanation
    assert "2 < 3" in pending.explanation
    assert steps[-1].explanation.startswith("All pairs computed")
