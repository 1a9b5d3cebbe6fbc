"""
Waypoint - Stepwise Grid Pathfinding Engine

This package provides an incremental graph-search engine over weighted
8-directional grids. It includes:

- Grid construction from terrain matrices with precomputed adjacency
- A binary-heap priority queue with membership tests and decrease-key
- A resumable search state machine running breadth-first, Dijkstra,
  greedy best-first or A* one frontier expansion at a time
- Lifecycle notifications for external visualizers
"""

__version__ = "0.1.0"
__author__ = "Waypoint Team"
__license__ = "See LICENSE file"

# Version compatibility check
import sys

if sys.version_info < (3, 12):
    raise RuntimeError("Waypoint requires Python 3.12 or higher")

# Import commonly used components for easier access
from .core.enums import SearchMode, TerrainType
from .core.grid import Grid
from .core.models import Cell
from .core.search import SearchConfig, SearchEngine, SearchResult, find_path

__all__ = [
    "Cell",
    "Grid",
    "SearchConfig",
    "SearchEngine",
    "SearchMode",
    "SearchResult",
    "TerrainType",
    "find_path",
]
