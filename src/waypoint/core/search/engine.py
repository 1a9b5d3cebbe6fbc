"""
Stepwise search engine.

The SearchEngine runs one search over one grid as an explicit state
machine: ``init()`` seeds the run, each ``step()`` expands exactly one
frontier cell, and the run ends when the goal is reached or the frontier
is exhausted. Every intermediate state (frontier, explored set, breadcrumb
trail) can be inspected between steps.

Pacing is kept out of the algorithm. ``step()`` never waits; ``run()`` is
an async driver that sleeps between steps and can be cancelled at any of
those pauses, and ``iter_steps()`` is a plain generator over the same
sequence.

Example:
    >>> engine = SearchEngine()
    >>> engine.init(grid, (0, 0), (4, 4), SearchMode.A_STAR)
    >>> while not engine.is_complete:
    ...     snapshot = engine.step()
    >>> engine.path_cost
    5.6
"""

import asyncio
import logging
import math
from time import time
from typing import Iterator, List, Optional, Set, Tuple, Union

from ..enums import SearchEvent, SearchMode, SearchStatus
from ..exceptions import (
    ConfigurationError,
    InvalidConfigError,
    InvalidEndpointError,
    InvalidOperationError,
    InvariantViolationError,
    MissingGraphError,
)
from ..grid import Grid
from ..models import Cell, Coordinates
from .events import Listener, SearchEventManager
from .models import PerformanceMetrics, SearchConfig, SearchResult, SearchSnapshot
from .queue import PriorityQueue
from .strategies import ExpansionStrategy, create_strategy
from .utils import MemoryManager, edge_weight, get_heuristic

logger = logging.getLogger(__name__)

Endpoint = Union[Cell, Coordinates]


class SearchEngine:
    """
    Incremental graph search over a Grid.

    Exactly one run is active per engine, and a grid must not be shared by
    two engines running at the same time: cells carry the run's costs and
    breadcrumbs.

    Attributes:
        config (SearchConfig): Options applied to every run of this engine
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize an engine with no active run."""
        self.config = config or SearchConfig()
        self._events = SearchEventManager()

        self._grid: Optional[Grid] = None
        self._start: Optional[Cell] = None
        self._goal: Optional[Cell] = None
        self._mode: Optional[SearchMode] = None
        self._strategy: Optional[ExpansionStrategy] = None
        self._status = SearchStatus.UNINITIALIZED

        self._frontier: PriorityQueue[Cell] = PriorityQueue()
        self._explored: List[Cell] = []
        self._explored_set: Set[Cell] = set()
        self._path: List[Cell] = []
        self._current: Optional[Cell] = None
        self._iterations = 0

        self._metrics: Optional[PerformanceMetrics] = None
        self._memory_manager: Optional[MemoryManager] = None
        self._running = False
        self._cancel_requested = False

    def __repr__(self) -> str:
        mode = self._mode.value if self._mode else None
        return (
            f"SearchEngine(mode={mode}, status={self._status.value}, "
            f"iterations={self._iterations})"
        )

    # Read-only state

    @property
    def grid(self) -> Optional[Grid]:
        return self._grid

    @property
    def start(self) -> Optional[Cell]:
        return self._start

    @property
    def goal(self) -> Optional[Cell]:
        return self._goal

    @property
    def mode(self) -> Optional[SearchMode]:
        return self._mode

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def is_complete(self) -> bool:
        return self._status is SearchStatus.COMPLETE

    @property
    def is_running(self) -> bool:
        """Whether the async ``run()`` loop is currently active."""
        return self._running

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def frontier(self) -> Tuple[Cell, ...]:
        """Frontier cells in heap order."""
        return tuple(self._frontier.snapshot())

    @property
    def explored(self) -> Tuple[Cell, ...]:
        """Expanded cells in expansion order."""
        return tuple(self._explored)

    @property
    def path(self) -> Tuple[Cell, ...]:
        return tuple(self._path)

    @property
    def path_cost(self) -> float:
        """Total edge and terrain cost along the current path, ``inf`` if none."""
        if not self._path:
            return math.inf
        return sum(
            (edge_weight(self._grid, a, b) for a, b in zip(self._path, self._path[1:])),
            0.0,
        )

    @property
    def metrics(self) -> Optional[PerformanceMetrics]:
        return self._metrics

    # Listeners

    def add_listener(self, listener: Listener) -> None:
        """Register a listener for ON_INIT, ON_STEP and ON_COMPLETE."""
        self._events.add_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._events.remove_listener(listener)

    # Lifecycle

    def init(
        self,
        grid: Optional[Grid],
        start: Optional[Endpoint],
        goal: Optional[Endpoint],
        mode: SearchMode = SearchMode.BREADTH_FIRST,
    ) -> SearchSnapshot:
        """
        Start a new run.

        Resets every cell of the grid, since a previous run leaves stale
        costs and breadcrumbs behind, and seeds the frontier with the start
        cell at cost 0.

        Args:
            grid: Grid to search
            start: Start cell, or its (x, y) coordinates
            goal: Goal cell, or its (x, y) coordinates
            mode: Search strategy

        Returns:
            Snapshot of the freshly initialized run

        Raises:
            MissingGraphError: If grid is None
            InvalidEndpointError: If start or goal is missing, outside the
                grid, blocked, or a cell of another grid
            InvalidConfigError: If mode is not a SearchMode
            InvalidOperationError: If ``run()`` is active on this engine
        """
        if self._running:
            raise InvalidOperationError("Cannot re-initialize while a run is active")

        try:
            if grid is None:
                raise MissingGraphError("A grid is required to initialize a search")
            start_cell = self._resolve_endpoint(grid, start, "start")
            goal_cell = self._resolve_endpoint(grid, goal, "goal")
            try:
                mode = SearchMode(mode)
            except ValueError:
                raise InvalidConfigError(f"Unknown search mode {mode!r}")
        except ConfigurationError as e:
            logger.warning(f"Search init rejected: {e}")
            raise

        heuristic = get_heuristic(self.config.heuristic)

        grid.reset_search_state()
        self._grid = grid
        self._start = start_cell
        self._goal = goal_cell
        self._mode = mode
        self._strategy = create_strategy(mode, grid, goal_cell, heuristic)

        self._frontier = PriorityQueue()
        self._explored = []
        self._explored_set = set()
        self._path = []
        self._current = None
        self._iterations = 0
        self._cancel_requested = False

        start_cell.cost_so_far = 0.0
        start_cell.priority = 0.0
        self._frontier.enqueue(start_cell)

        self._metrics = PerformanceMetrics(operation=mode.value, start_time=time())
        self._memory_manager = MemoryManager(self.config.max_memory_mb)
        self._status = SearchStatus.RUNNING

        logger.info(
            f"Search initialized: mode={mode.value} start={start_cell.coordinates} "
            f"goal={goal_cell.coordinates}"
        )
        snapshot = self.snapshot()
        self._events.notify(SearchEvent.ON_INIT, snapshot)
        return snapshot

    @staticmethod
    def _resolve_endpoint(grid: Grid, endpoint: Optional[Endpoint], label: str) -> Cell:
        if endpoint is None:
            raise InvalidEndpointError(f"The {label} cell is missing")

        if isinstance(endpoint, Cell):
            if endpoint not in grid:
                raise InvalidEndpointError(
                    f"The {label} cell {endpoint.coordinates} does not belong to this grid"
                )
            cell = endpoint
        else:
            try:
                x, y = endpoint
            except (TypeError, ValueError):
                raise InvalidEndpointError(f"The {label} must be a Cell or (x, y), got {endpoint!r}")
            if any(isinstance(v, bool) or not isinstance(v, int) for v in (x, y)):
                raise InvalidEndpointError(
                    f"The {label} coordinates must be integers, got {endpoint!r}"
                )
            cell = grid.find_cell(x, y)
            if cell is None:
                raise InvalidEndpointError(f"The {label} ({x}, {y}) is outside the grid")

        if cell.is_blocked:
            raise InvalidEndpointError(f"The {label} cell {cell.coordinates} is blocked")
        return cell

    def step(self) -> SearchSnapshot:
        """
        Expand one frontier cell.

        When the frontier is already empty the run completes without a
        step notification. Otherwise the lowest-key cell is expanded, the
        path is rebuilt if the goal has been reached, ON_STEP fires, and,
        if the run ended with this step, ON_COMPLETE follows.

        Returns:
            Snapshot of the run after the step

        Raises:
            InvalidOperationError: If ``init()`` was never called
        """
        if self._status is SearchStatus.UNINITIALIZED:
            raise InvalidOperationError("init() must be called before step()")
        if self._status is SearchStatus.COMPLETE:
            return self.snapshot()

        if not self._frontier:
            logger.debug("Frontier exhausted")
            self._complete()
            return self.snapshot()

        self._memory_manager.check_memory()

        current = self._frontier.dequeue()
        self._current = current
        self._iterations += 1
        if current not in self._explored_set:
            self._explored_set.add(current)
            self._explored.append(current)

        added = self._strategy.expand(current, self._frontier, self._explored_set)
        logger.debug(
            f"Step {self._iterations}: expanded {current.coordinates}, "
            f"added {[c.coordinates for c in added]}, frontier size {len(self._frontier)}"
        )

        finished = False
        if current is self._goal or self._goal in self._frontier:
            self._path = self.reconstruct_path(self._goal)
            finished = self.config.exit_on_goal

        snapshot = self.snapshot()
        self._events.notify(SearchEvent.ON_STEP, snapshot)

        if finished:
            self._complete()
            snapshot = self.snapshot()
        return snapshot

    def _complete(self) -> None:
        self._status = SearchStatus.COMPLETE
        self._metrics.end_time = time()
        self._metrics.iterations = self._iterations
        self._metrics.path_length = len(self._path)
        self._metrics.nodes_explored = len(self._explored)
        self._metrics.max_memory_used = self._memory_manager.peak_memory

        if self._path:
            logger.info(
                f"Search complete: mode={self._mode.value} path length={len(self._path)} "
                f"cost={self.path_cost:.2f} iterations={self._iterations} "
                f"elapsed={self._metrics.duration:.1f}ms"
            )
        else:
            logger.info(
                f"Search complete: mode={self._mode.value} no path from "
                f"{self._start.coordinates} to {self._goal.coordinates} "
                f"after {self._iterations} iterations"
            )
        self._events.notify(SearchEvent.ON_COMPLETE, self.snapshot())

    def reconstruct_path(self, goal: Optional[Cell] = None) -> List[Cell]:
        """
        Follow breadcrumbs back from ``goal`` to the cell with no predecessor.

        Args:
            goal: Cell to trace back from, defaults to the run's goal

        Returns:
            Cells ordered from start to goal; empty if the goal was never
            reached in this run

        Raises:
            InvariantViolationError: If the breadcrumbs form a cycle
        """
        goal = goal if goal is not None else self._goal
        if goal is None or self._grid is None:
            return []
        if goal.predecessor is None and goal is not self._start:
            return []

        path = [goal]
        coordinates = goal.predecessor
        while coordinates is not None:
            cell = self._grid.cell_at(coordinates)
            path.append(cell)
            if len(path) > len(self._grid):
                raise InvariantViolationError(
                    f"Breadcrumb cycle detected while tracing back from {goal.coordinates}"
                )
            coordinates = cell.predecessor
        path.reverse()
        return path

    def snapshot(self) -> SearchSnapshot:
        """Capture the current state of the run."""
        return SearchSnapshot(
            status=self._status,
            iteration=self._iterations,
            frontier=tuple(c.coordinates for c in self._frontier.snapshot()),
            explored=tuple(c.coordinates for c in self._explored),
            path=tuple(c.coordinates for c in self._path),
            current=self._current.coordinates if self._current else None,
        )

    def result(self) -> SearchResult:
        """Summarize the run so far."""
        if self._mode is None:
            raise InvalidOperationError("init() must be called before result()")
        return SearchResult(
            mode=self._mode,
            path=list(self._path),
            total_cost=self.path_cost,
            iterations=self._iterations,
            explored_count=len(self._explored),
            metrics=self._metrics,
        )

    # Drivers

    def iter_steps(self) -> Iterator[SearchSnapshot]:
        """Yield one snapshot per step until the run completes."""
        while not self.is_complete:
            yield self.step()

    def run_to_completion(self) -> SearchResult:
        """Step until the run completes, without pausing."""
        for _ in self.iter_steps():
            pass
        return self.result()

    async def run(self, step_delay: Optional[float] = None) -> SearchResult:
        """
        Step until the run completes, pausing between steps.

        The loop can be stopped at any pause, either by cancelling the task
        or by calling ``cancel()``; all state is consistent at a pause, so a
        later ``run()`` or ``step()`` simply continues.

        Args:
            step_delay: Seconds to wait between steps, defaults to
                ``config.step_delay``

        Returns:
            Result of the run so far

        Raises:
            InvalidOperationError: If ``init()`` was never called or another
                ``run()`` is active
        """
        if self._status is SearchStatus.UNINITIALIZED:
            raise InvalidOperationError("init() must be called before run()")
        if self._running:
            raise InvalidOperationError("A run is already active on this engine")

        delay = self.config.step_delay if step_delay is None else step_delay
        if delay < 0:
            raise ValueError("step_delay cannot be negative")

        self._running = True
        self._cancel_requested = False
        try:
            while not self.is_complete:
                if self._cancel_requested:
                    logger.info(f"Run cancelled after {self._iterations} iterations")
                    break
                self.step()
                if self.is_complete:
                    break
                await asyncio.sleep(delay)
        finally:
            self._running = False
            self._cancel_requested = False
        return self.result()

    def cancel(self) -> None:
        """Ask an active ``run()`` to stop before its next step."""
        if self._running:
            self._cancel_requested = True
