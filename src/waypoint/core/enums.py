"""
Enumerations shared by the grid and the search engine.
"""

from enum import Enum, IntEnum, auto
from typing import Tuple


class TerrainType(IntEnum):
    """
    Terrain of a grid cell.

    The ordinal doubles as the traversal penalty charged when a path
    departs a cell of this terrain. Blocked cells are never traversed,
    so their ordinal is never charged.
    """

    OPEN = 0
    BLOCKED = 1
    LIGHT_TERRAIN = 2
    MEDIUM_TERRAIN = 3
    HEAVY_TERRAIN = 4

    @property
    def cost(self) -> int:
        """Penalty added to every edge leaving a cell of this terrain."""
        return int(self)


class SearchMode(Enum):
    """Search strategies supported by the engine."""

    BREADTH_FIRST = "breadth_first"
    DIJKSTRA = "dijkstra"
    GREEDY_BEST_FIRST = "greedy_best_first"
    A_STAR = "a_star"


class SearchStatus(Enum):
    """Lifecycle states of a search engine."""

    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    COMPLETE = "complete"


class SearchEvent(Enum):
    """Notifications fired by a search engine."""

    ON_INIT = auto()
    ON_STEP = auto()
    ON_COMPLETE = auto()


# Compass offsets, North first then clockwise
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)
