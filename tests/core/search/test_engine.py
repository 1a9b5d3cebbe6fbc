"""Tests for the SearchEngine state machine."""

import dataclasses
import itertools
import math

import pytest

from waypoint.core.enums import SearchEvent, SearchMode, SearchStatus
from waypoint.core.exceptions import (
    InvalidConfigError,
    InvalidEndpointError,
    InvalidOperationError,
    InvariantViolationError,
    MissingGraphError,
)
from waypoint.core.grid import Grid
from waypoint.core.search import SearchConfig, SearchEngine
from waypoint.core.search import utils


class Recorder:
    """Listener object that records every event it sees."""

    def __init__(self):
        self.events = []
        self.snapshots = []

    def on_search_event(self, event, snapshot):
        self.events.append(event)
        self.snapshots.append(snapshot)


@pytest.fixture
def engine():
    return SearchEngine()


def test_new_engine_is_uninitialized(engine):
    """Test the state of an engine before init()."""
    assert engine.status is SearchStatus.UNINITIALIZED
    assert not engine.is_complete
    assert not engine.is_running
    assert engine.grid is None
    assert engine.frontier == ()
    assert engine.path == ()
    assert math.isinf(engine.path_cost)


def test_step_before_init_fails(engine):
    """Test that stepping an uninitialized engine is an error."""
    with pytest.raises(InvalidOperationError):
        engine.step()
    with pytest.raises(InvalidOperationError):
        engine.result()


def test_init_seeds_frontier_with_start(engine, open_grid):
    """Test the state right after init()."""
    snapshot = engine.init(open_grid, (0, 0), (4, 4), SearchMode.DIJKSTRA)

    assert snapshot.status is SearchStatus.RUNNING
    assert snapshot.iteration == 0
    assert snapshot.frontier == ((0, 0),)
    assert snapshot.explored == ()
    assert snapshot.path == ()
    assert snapshot.current is None

    start = open_grid.get_cell(0, 0)
    assert engine.start is start
    assert engine.goal is open_grid.get_cell(4, 4)
    assert engine.mode is SearchMode.DIJKSTRA
    assert start.cost_so_far == 0.0
    assert start.predecessor is None


def test_init_defaults_to_breadth_first(engine, open_grid):
    """Test the default search mode."""
    engine.init(open_grid, (0, 0), (4, 4))
    assert engine.mode is SearchMode.BREADTH_FIRST


def test_init_accepts_cells_and_mode_names(engine, open_grid):
    """Test endpoints given as Cell objects and the mode given by value."""
    start = open_grid.get_cell(1, 2)
    goal = open_grid.get_cell(3, 0)
    engine.init(open_grid, start, goal, "greedy_best_first")

    assert engine.start is start
    assert engine.goal is goal
    assert engine.mode is SearchMode.GREEDY_BEST_FIRST


def test_init_without_grid(engine):
    """Test that a missing grid is rejected."""
    with pytest.raises(MissingGraphError):
        engine.init(None, (0, 0), (1, 1))
    assert engine.status is SearchStatus.UNINITIALIZED


@pytest.mark.parametrize(
    "start, goal",
    [
        (None, (4, 0)),
        ((0, 0), None),
        ((5, 0), (4, 0)),
        ((0, 0), (0, -1)),
        ((2, 1), (4, 0)),
        ((0, 0), (2, 2)),
        ((0, 0, 0), (4, 0)),
        (7, (4, 0)),
        ((1.0, 2.0), (4, 0)),
        (("1", "2"), (4, 0)),
        ((0, 0), (True, 0)),
    ],
)
def test_init_rejects_bad_endpoints(engine, walled_grid, start, goal):
    """Test missing, out-of-bounds, blocked and malformed endpoints."""
    with pytest.raises(InvalidEndpointError):
        engine.init(walled_grid, start, goal)
    assert engine.status is SearchStatus.UNINITIALIZED


def test_init_rejects_cell_of_another_grid(engine, open_matrix):
    """Test that endpoints must belong to the searched grid."""
    grid = Grid.build(open_matrix)
    other = Grid.build(open_matrix)
    with pytest.raises(InvalidEndpointError, match="does not belong"):
        engine.init(grid, other.get_cell(0, 0), (4, 4))


def test_init_rejects_unknown_mode(engine, open_grid):
    """Test that an unknown mode is a configuration error."""
    with pytest.raises(InvalidConfigError):
        engine.init(open_grid, (0, 0), (4, 4), "depth_first")


def test_failed_init_keeps_previous_run(engine, walled_grid):
    """Test that a rejected init() leaves the active run untouched."""
    engine.init(walled_grid, (0, 0), (1, 2), SearchMode.BREADTH_FIRST)
    engine.step()
    engine.step()
    before = engine.snapshot()
    costs = [cell.cost_so_far for cell in walled_grid.cells()]

    with pytest.raises(InvalidEndpointError):
        engine.init(walled_grid, (0, 0), (2, 0), SearchMode.A_STAR)

    assert engine.snapshot() == before
    assert engine.mode is SearchMode.BREADTH_FIRST
    assert [cell.cost_so_far for cell in walled_grid.cells()] == costs


def test_reinit_resets_grid_state(engine, open_grid):
    """Test that a second init() discards everything from the first run."""
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.DIJKSTRA)
    engine.run_to_completion()
    assert engine.is_complete

    snapshot = engine.init(open_grid, (4, 4), (0, 0), SearchMode.A_STAR)

    assert snapshot.status is SearchStatus.RUNNING
    assert snapshot.frontier == ((4, 4),)
    assert engine.iterations == 0
    assert engine.explored == ()
    assert engine.path == ()
    for cell in open_grid.cells():
        if cell is engine.start:
            continue
        assert math.isinf(cell.cost_so_far)
        assert cell.predecessor is None


def test_reinit_is_repeatable(engine, heavy_corridor_grid):
    """Test that init() after a finished run reproduces the same run."""
    engine.init(heavy_corridor_grid, (0, 0), (4, 0), SearchMode.A_STAR)
    first = engine.run_to_completion()
    engine.init(heavy_corridor_grid, (0, 0), (4, 0), SearchMode.A_STAR)
    second = engine.run_to_completion()

    assert first.coordinates == second.coordinates
    assert first.iterations == second.iterations
    assert first.total_cost == pytest.approx(second.total_cost)


def test_step_expands_one_cell(engine, open_grid):
    """Test the effect of a single step."""
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.BREADTH_FIRST)
    snapshot = engine.step()

    assert snapshot.iteration == 1
    assert snapshot.current == (0, 0)
    assert snapshot.explored == ((0, 0),)
    assert sorted(snapshot.frontier) == [(0, 1), (1, 0), (1, 1)]
    assert snapshot.status is SearchStatus.RUNNING


def test_step_after_completion_is_a_no_op(engine, open_grid):
    """Test that a complete run ignores further steps."""
    recorder = Recorder()
    engine.init(open_grid, (0, 0), (1, 1), SearchMode.DIJKSTRA)
    engine.run_to_completion()
    engine.add_listener(recorder)
    done = engine.snapshot()

    assert engine.step() == done
    assert engine.step() == done
    assert recorder.events == []


def test_explored_cells_are_unique(open_grid):
    """Test that no cell is expanded twice."""
    engine = SearchEngine(SearchConfig(exit_on_goal=False))
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    engine.run_to_completion()

    explored = [cell.coordinates for cell in engine.explored]
    assert len(explored) == len(set(explored)) == 25


def test_frontier_exhaustion_completes_without_step_event(engine, walled_grid):
    """Test the event sequence of an unreachable goal."""
    recorder = Recorder()
    engine.add_listener(recorder)
    engine.init(walled_grid, (0, 0), (4, 0), SearchMode.BREADTH_FIRST)
    for _ in range(6):
        engine.step()
    assert not engine.is_complete
    assert engine.frontier == ()

    engine.step()

    assert engine.is_complete
    assert engine.iterations == 6
    assert recorder.events == (
        [SearchEvent.ON_INIT] + [SearchEvent.ON_STEP] * 6 + [SearchEvent.ON_COMPLETE]
    )


def test_goal_step_fires_step_then_complete(engine, open_grid):
    """Test that ON_COMPLETE follows the ON_STEP of the final step."""
    calls = []
    engine.add_listener(lambda event, snapshot: calls.append((event, snapshot.status)))
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    engine.run_to_completion()

    assert calls[0] == (SearchEvent.ON_INIT, SearchStatus.RUNNING)
    assert calls[-2] == (SearchEvent.ON_STEP, SearchStatus.RUNNING)
    assert calls[-1] == (SearchEvent.ON_COMPLETE, SearchStatus.COMPLETE)
    assert [event for event, _ in calls].count(SearchEvent.ON_COMPLETE) == 1


def test_failing_listener_does_not_stop_the_run(engine, open_grid, caplog):
    """Test that listener errors are logged and skipped."""
    recorder = Recorder()

    def broken(event, snapshot):
        raise RuntimeError("listener failure")

    engine.add_listener(broken)
    engine.add_listener(recorder)
    engine.init(open_grid, (0, 0), (2, 2), SearchMode.A_STAR)
    result = engine.run_to_completion()

    assert result.found
    assert recorder.events[-1] is SearchEvent.ON_COMPLETE
    assert "Error notifying listener" in caplog.text


def test_removed_listener_is_not_notified(engine, open_grid):
    """Test listener removal."""
    recorder = Recorder()
    engine.add_listener(recorder)
    engine.remove_listener(recorder)
    engine.init(open_grid, (0, 0), (2, 2))
    engine.step()
    assert recorder.events == []


def test_snapshots_are_immutable(engine, open_grid):
    """Test that a handed-out snapshot does not change as the run moves on."""
    recorder = Recorder()
    engine.add_listener(recorder)
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.BREADTH_FIRST)
    engine.step()
    first_step = recorder.snapshots[1]
    engine.step()

    assert first_step.iteration == 1
    assert first_step.explored == ((0, 0),)
    with pytest.raises(dataclasses.FrozenInstanceError):
        first_step.iteration = 5


def test_reconstruct_path_of_unreached_cell(engine, open_grid):
    """Test that an undiscovered goal has no path."""
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.BREADTH_FIRST)
    engine.step()
    assert engine.reconstruct_path() == []
    assert engine.reconstruct_path(open_grid.get_cell(1, 1)) == [
        open_grid.get_cell(0, 0),
        open_grid.get_cell(1, 1),
    ]


def test_reconstruct_path_detects_cycles(engine, open_grid):
    """Test that looping breadcrumbs are reported instead of followed forever."""
    engine.init(open_grid, (0, 0), (4, 4))
    a = open_grid.get_cell(1, 1)
    b = open_grid.get_cell(2, 2)
    a.predecessor = b.coordinates
    b.predecessor = a.coordinates

    with pytest.raises(InvariantViolationError, match="cycle"):
        engine.reconstruct_path(b)


def test_path_cost_sums_edge_weights(engine, heavy_corridor_grid):
    """Test the cost of the found path."""
    engine.init(heavy_corridor_grid, (0, 0), (4, 0), SearchMode.BREADTH_FIRST)
    engine.run_to_completion()
    assert engine.path_cost == pytest.approx(16.0)


def test_metrics_are_finalized_on_completion(engine, open_grid):
    """Test the performance counters of a finished run."""
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    assert engine.metrics.end_time == 0.0

    result = engine.run_to_completion()
    metrics = result.metrics

    assert metrics.operation == "a_star"
    assert metrics.end_time >= metrics.start_time
    assert metrics.duration >= 0
    assert metrics.iterations == result.iterations > 0
    assert metrics.path_length == len(result.path)
    assert metrics.nodes_explored == result.explored_count
    assert metrics.max_memory_used > 0


def test_peak_memory_is_tracked_per_run(engine, open_grid, monkeypatch):
    """Test that each init() starts a fresh peak memory reading."""
    monkeypatch.setattr(utils, "get_memory_usage", lambda: 500)
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    assert engine.run_to_completion().metrics.max_memory_used == 500

    monkeypatch.setattr(utils, "get_memory_usage", lambda: 100)
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    assert engine.run_to_completion().metrics.max_memory_used == 100


def test_memory_ceiling_stops_the_run(open_grid, monkeypatch):
    """Test that memory growth over the ceiling raises MemoryError."""
    megabyte = 1024 * 1024
    samples = itertools.chain([100 * megabyte], itertools.repeat(200 * megabyte))
    monkeypatch.setattr(utils, "get_memory_usage", lambda: next(samples))

    engine = SearchEngine(SearchConfig(max_memory_mb=50))
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.DIJKSTRA)

    with pytest.raises(MemoryError, match="exceeds limit"):
        engine.step()


def test_repr(engine, open_grid):
    """Test the engine representation."""
    assert "uninitialized" in repr(engine)
    engine.init(open_grid, (0, 0), (4, 4), SearchMode.A_STAR)
    assert repr(engine) == "SearchEngine(mode=a_star, status=running, iterations=0)"
