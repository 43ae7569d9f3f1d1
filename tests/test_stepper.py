import pytest

from algorithms import StepOutcome
from engine import DWELL_TIMES, SPEED_PRESETS, Highlight, Stepper, StepperState


@pytest.fixture
def stepper(example_adjacency):
    s = Stepper()
    s.start(example_adjacency)
    return s


def test_lifecycle(example_adjacency):
    s = Stepper()
    assert s.state == StepperState.IDLE
    with pytest.raises(RuntimeError):
        s.next_step()

    s.start(example_adjacency)
    assert s.state == StepperState.PAUSED
    assert s.current_step is None
    assert s.highlight() == Highlight()

    s.reset()
    assert s.state == StepperState.IDLE
    assert s.cursor is None


def test_next_step_buffers_and_notifies(example_adjacency):
    seen = []
    s = Stepper(on_step=seen.append)
    s.start(example_adjacency)
    assert s.next_step() is True
    assert s.next_step() is True
    assert s.total_steps == 2
    assert seen == s.steps


def test_jump_to_end_finishes(stepper):
    stepper.jump_to_end()
    assert stepper.is_finished
    assert stepper.current_step.outcome is StepOutcome.DONE
    assert stepper.total_steps == 50
    assert stepper.next_step() is False
    assert stepper.total_steps == 50


def test_restart_replays_same_graph(stepper):
    stepper.jump_to_end()
    stepper.restart()
    assert stepper.state == StepperState.PAUSED
    assert stepper.steps == []
    assert stepper.cursor.indices == (-1, 3, 0)


def test_restart_requires_start():
    with pytest.raises(RuntimeError):
        Stepper().restart()


def test_highlight_follows_outcome(stepper):
    stepper.next_step()
    assert stepper.highlight() == Highlight(tone="inspect", vertices=[0, 3])

    for _ in range(4):
        stepper.next_step()
    assert stepper.current_step.outcome is StepOutcome.IMPROVED_PATH_PENDING
    h = stepper.highlight()
    assert h.tone == "inferior"
    assert h.vertices == [1, 2]
    assert h.edges == [(1, 2)]

    stepper.next_step()
    h = stepper.highlight()
    assert h.tone == "improved"
    assert h.vertices == [1, 0, 2]
    assert h.to_dict()["edges"] == [[1, 0], [0, 2]]


def test_highlight_new_path(stepper):
    while stepper.next_step():
        if stepper.current_step.outcome is StepOutcome.NEW_PATH_ESTABLISHED:
            break
    step = stepper.current_step
    h = stepper.highlight()
    assert h.tone == "new"
    assert h.vertices[0] == step.i and h.vertices[-1] == step.j


def test_tick_respects_dwell_time(stepper):
    stepper.play()
    assert stepper.is_playing

    t0 = stepper._last_tick + 1.0
    assert stepper.tick(now=t0) is True          # nothing shown yet: no dwell
    assert stepper.current_step.outcome is StepOutcome.NO_CHANGE
    assert stepper.current_dwell == DWELL_TIMES[StepOutcome.NO_CHANGE]

    assert stepper.tick(now=t0 + 0.1) is False
    assert stepper.tick(now=t0 + 0.3) is True
    assert stepper.total_steps == 2


def test_tick_does_nothing_when_paused(stepper):
    assert stepper.tick(now=1e9) is False
    stepper.toggle_play()
    stepper.toggle_play()
    assert stepper.state == StepperState.PAUSED
    assert stepper.tick(now=1e9) is False


def test_play_after_finish_is_ignored(stepper):
    stepper.jump_to_end()
    stepper.play()
    assert stepper.state == StepperState.FINISHED


def test_speed_controls(stepper):
    stepper.set_speed("slow")
    assert stepper.speed == SPEED_PRESETS["slow"]
    stepper.set_speed("warp")
    assert stepper.speed == SPEED_PRESETS["medium"]
    stepper.set_speed_value(0.0)
    assert stepper.speed == pytest.approx(0.05)

    stepper.set_speed("turbo")
    stepper.next_step()
    assert stepper.current_dwell == pytest.approx(0.2 * 0.1)
