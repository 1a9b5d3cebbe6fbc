"""
Data models for stepwise grid search.

This module provides the data structures exchanged with callers of the
search engine:
- SearchConfig: Validated options for a search run
- SearchSnapshot: Read-only view of a run's state after a step
- SearchResult: Final outcome of a run
- PerformanceMetrics: Timing and effort counters for a run

Example:
    >>> config = SearchConfig(exit_on_goal=False, heuristic="manhattan")
    >>> result = find_path(grid, (0, 0), (4, 4), SearchMode.A_STAR, config)
    >>> result.coordinates
    [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..enums import SearchMode, SearchStatus
from ..exceptions import InvalidConfigError
from ..models import Cell, Coordinates
from .utils import HEURISTICS

# Constants
DEFAULT_STEP_DELAY = 0.1  # Seconds between steps of a paced run


@dataclass
class SearchConfig:
    """
    Options for a search run.

    Attributes:
        exit_on_goal: Stop as soon as the goal enters the frontier; when
            False the run keeps expanding until the frontier is exhausted.
            Stopping early returns the first route found to the goal, which
            for Dijkstra and A* is often not the cheapest one. Only a run
            with exit_on_goal=False guarantees a minimum-cost path.
        heuristic: Name of the distance estimate used by greedy best-first
            and A* ("octile" or "manhattan")
        step_delay: Default pause in seconds between steps of ``run()``
        max_memory_mb: Optional ceiling on memory growth during a run
    """

    exit_on_goal: bool = True
    heuristic: str = "octile"
    step_delay: float = DEFAULT_STEP_DELAY
    max_memory_mb: Optional[float] = None

    def __post_init__(self):
        """Validate configuration values."""
        if not isinstance(self.exit_on_goal, bool):
            raise InvalidConfigError("exit_on_goal must be a boolean")

        if self.heuristic not in HEURISTICS:
            raise InvalidConfigError(
                f"heuristic must be one of {sorted(HEURISTICS)}, got {self.heuristic!r}"
            )

        if isinstance(self.step_delay, bool) or not isinstance(self.step_delay, (int, float)):
            raise InvalidConfigError("step_delay must be a numeric value")
        if self.step_delay < 0 or math.isnan(self.step_delay):
            raise InvalidConfigError("step_delay cannot be negative")

        if self.max_memory_mb is not None:
            if not isinstance(self.max_memory_mb, (int, float)):
                raise InvalidConfigError("max_memory_mb must be a numeric value")
            if self.max_memory_mb <= 0:
                raise InvalidConfigError("max_memory_mb must be positive")


@dataclass(frozen=True)
class SearchSnapshot:
    """
    State of a search run between two steps.

    Cells are reported by coordinates so a snapshot stays valid after the
    run moves on. The frontier is in heap order, not sorted.
    """

    status: SearchStatus
    iteration: int
    frontier: Tuple[Coordinates, ...] = ()
    explored: Tuple[Coordinates, ...] = ()
    path: Tuple[Coordinates, ...] = ()
    current: Optional[Coordinates] = None

    @property
    def is_complete(self) -> bool:
        return self.status is SearchStatus.COMPLETE


@dataclass
class PerformanceMetrics:
    """
    Timing and effort counters for one search run.

    The engine creates the metrics in ``init()`` with only the mode and
    start time set, and fills in the counters when the run completes.

    Attributes:
        operation: Search mode value of the run
        start_time: Wall-clock time of ``init()``
        end_time: Wall-clock time of completion (0.0 while running)
        iterations: Steps taken, exhaustion step excluded
        path_length: Cells in the path, 0 when no path was found
        nodes_explored: Cells expanded
        max_memory_used: Peak resident memory seen during the run (bytes)
    """

    operation: str
    start_time: float
    end_time: float = 0.0
    iterations: Optional[int] = None
    path_length: Optional[int] = None
    nodes_explored: Optional[int] = None
    max_memory_used: Optional[int] = None

    def __post_init__(self):
        """Validate metrics after initialization."""
        if not isinstance(self.operation, str) or not self.operation.strip():
            raise ValueError("operation must be a non-empty string")

        for name in ("start_time", "end_time"):
            if not isinstance(getattr(self, name), (int, float)):
                raise TypeError(f"{name} must be a numeric value")
        if self.end_time < 0:
            raise ValueError("end_time cannot be negative")
        if self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time cannot be before start_time")

        for name in ("iterations", "path_length", "nodes_explored", "max_memory_used"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer")
            if value < 0:
                raise ValueError(f"{name} cannot be negative")

    @property
    def is_finished(self) -> bool:
        return self.end_time > 0

    @property
    def duration(self) -> float:
        """Elapsed milliseconds, 0.0 while the run is still going."""
        return (self.end_time - self.start_time) * 1000 if self.is_finished else 0.0

    def to_dict(self) -> Dict[str, Union[str, float, int, None]]:
        """Convert metrics to a JSON-serializable dictionary."""
        return {
            "operation": self.operation,
            "duration_ms": self.duration,
            "iterations": self.iterations,
            "path_length": self.path_length,
            "nodes_explored": self.nodes_explored,
            "max_memory_used": self.max_memory_used,
        }


@dataclass
class SearchResult:
    """
    Outcome of a completed search run.

    Attributes:
        mode: Strategy that produced the result
        path: Cells from start to goal, empty when no path was found
        total_cost: Accumulated edge and terrain cost of the path, ``inf``
            when no path was found
        iterations: Number of steps taken
        explored_count: Number of cells expanded
        metrics: Performance metrics of the run
    """

    mode: SearchMode
    path: List[Cell] = field(default_factory=list)
    total_cost: float = math.inf
    iterations: int = 0
    explored_count: int = 0
    metrics: Optional[PerformanceMetrics] = None

    def __len__(self) -> int:
        return len(self.path)

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def coordinates(self) -> List[Coordinates]:
        return [cell.coordinates for cell in self.path]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "mode": self.mode.value,
            "found": self.found,
            "path": [list(c) for c in self.coordinates],
            "total_cost": self.total_cost if self.found else None,
            "iterations": self.iterations,
            "explored_count": self.explored_count,
            "metrics": self.metrics.to_dict() if self.metrics else None,
        }
