"""Stepwise grid search."""

from typing import Optional

from ..enums import SearchEvent, SearchMode, SearchStatus
from ..grid import Grid
from .engine import Endpoint, SearchEngine
from .events import SearchEventListener, SearchEventManager
from .models import (
    DEFAULT_STEP_DELAY,
    PerformanceMetrics,
    SearchConfig,
    SearchResult,
    SearchSnapshot,
)
from .queue import PriorityQueue
from .strategies import (
    STRATEGIES,
    AStarStrategy,
    BreadthFirstStrategy,
    DijkstraStrategy,
    ExpansionStrategy,
    GreedyBestFirstStrategy,
    create_strategy,
)
from .utils import HEURISTICS, edge_weight

__all__ = [
    "AStarStrategy",
    "BreadthFirstStrategy",
    "DEFAULT_STEP_DELAY",
    "DijkstraStrategy",
    "ExpansionStrategy",
    "GreedyBestFirstStrategy",
    "HEURISTICS",
    "PerformanceMetrics",
    "PriorityQueue",
    "STRATEGIES",
    "SearchConfig",
    "SearchEngine",
    "SearchEvent",
    "SearchEventListener",
    "SearchEventManager",
    "SearchMode",
    "SearchResult",
    "SearchSnapshot",
    "SearchStatus",
    "create_strategy",
    "edge_weight",
    "find_path",
]


def find_path(
    grid: Grid,
    start: Endpoint,
    goal: Endpoint,
    mode: SearchMode = SearchMode.A_STAR,
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    """
    Run a search to completion without pausing.

    With the default config the run stops as soon as the goal enters the
    frontier, so Dijkstra and A* return the first route found, which is
    often not the cheapest. Pass ``SearchConfig(exit_on_goal=False)`` to
    get a minimum-cost path from either of them.

    Args:
        grid: Grid to search
        start: Start cell or (x, y)
        goal: Goal cell or (x, y)
        mode: Search strategy, A* by default
        config: Optional search options

    Returns:
        SearchResult; ``found`` is False when the goal is unreachable

    Raises:
        ConfigurationError: If the grid or endpoints are unusable
    """
    engine = SearchEngine(config)
    engine.init(grid, start, goal, mode)
    return engine.run_to_completion()
