"""Core grid and search functionality."""

from .enums import DIRECTIONS, SearchEvent, SearchMode, SearchStatus, TerrainType
from .exceptions import (
    CellNotFoundError,
    ConfigurationError,
    EmptyQueueError,
    InvalidConfigError,
    InvalidDimensionError,
    InvalidEndpointError,
    InvalidOperationError,
    InvalidTerrainError,
    InvariantViolationError,
    MissingGraphError,
    ResourceNotFoundError,
    WaypointError,
)
from .models import Cell, Coordinates
from .grid import Grid
from .search import (
    PriorityQueue,
    SearchConfig,
    SearchEngine,
    SearchResult,
    SearchSnapshot,
    find_path,
)

__all__ = [
    "Cell",
    "CellNotFoundError",
    "ConfigurationError",
    "Coordinates",
    "DIRECTIONS",
    "EmptyQueueError",
    "Grid",
    "InvalidConfigError",
    "InvalidDimensionError",
    "InvalidEndpointError",
    "InvalidOperationError",
    "InvalidTerrainError",
    "InvariantViolationError",
    "MissingGraphError",
    "PriorityQueue",
    "ResourceNotFoundError",
    "SearchConfig",
    "SearchEngine",
    "SearchEvent",
    "SearchMode",
    "SearchResult",
    "SearchSnapshot",
    "SearchStatus",
    "TerrainType",
    "WaypointError",
    "find_path",
]
