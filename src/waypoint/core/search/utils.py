"""
Utility functions for grid search operations.
"""

import gc
import logging
import math
import os
import time
from typing import Callable, Dict, Optional

import psutil

from ..exceptions import InvariantViolationError
from ..grid import Grid
from ..models import Cell

logger = logging.getLogger(__name__)

# Constants
EPSILON = 1e-10  # Floating point comparison tolerance
MEMORY_CHECK_INTERVAL = 0.1  # Seconds between RSS samples

Heuristic = Callable[[Cell, Cell], float]

HEURISTICS: Dict[str, Heuristic] = {
    "octile": Grid.distance,
    "manhattan": Grid.manhattan_distance,
}


def get_heuristic(name: str) -> Heuristic:
    """Look up a heuristic by name."""
    try:
        return HEURISTICS[name]
    except KeyError:
        raise ValueError(f"Unknown heuristic '{name}', expected one of {sorted(HEURISTICS)}")


def edge_weight(grid: Grid, current: Cell, neighbor: Cell) -> float:
    """
    Cost of moving from ``current`` to an adjacent ``neighbor``.

    The octile length of the move plus the terrain penalty of the cell
    being departed.

    Raises:
        InvariantViolationError: If the weight is negative or not finite
    """
    weight = grid.distance(current, neighbor) + current.terrain_type.cost
    if math.isnan(weight) or math.isinf(weight):
        raise InvariantViolationError(
            f"Edge weight {current.coordinates} -> {neighbor.coordinates} must be finite"
        )
    if weight < 0:
        raise InvariantViolationError(
            f"Negative edge weight {weight} on {current.coordinates} -> {neighbor.coordinates}"
        )
    return weight


def is_better_cost(new_cost: float, old_cost: float) -> bool:
    """
    Check whether ``new_cost`` improves on ``old_cost``.

    An infinite old cost is always improved on; otherwise the new cost must
    be lower by more than EPSILON so that float noise never re-routes a path.
    """
    if math.isinf(old_cost):
        return True
    return (new_cost - old_cost) < -EPSILON


class MemoryManager:
    """Memory ceiling for a search run."""

    def __init__(self, max_memory_mb: Optional[float] = None):
        """Initialize memory manager."""
        self.max_memory = max_memory_mb * 1024 * 1024 if max_memory_mb else None
        self.start_memory = get_memory_usage()
        self._peak_memory = self.start_memory
        self._last_check = 0.0
        self._check_interval = MEMORY_CHECK_INTERVAL

    def check_memory(self) -> None:
        """
        Check if memory growth since the run started exceeds the limit.

        Samples are throttled to one per check interval.

        Raises:
            MemoryError: If growth stays over the limit after a collection
        """
        current_time = time.monotonic()
        if current_time - self._last_check < self._check_interval:
            return
        self._last_check = current_time

        current = get_memory_usage()
        self._peak_memory = max(self._peak_memory, current)
        if not self.max_memory:
            return

        if current - self.start_memory > self.max_memory:
            gc.collect()
            current = get_memory_usage()

            if current - self.start_memory > self.max_memory:
                raise MemoryError(
                    f"Memory usage {(current - self.start_memory) / 1024 / 1024:.1f}MB exceeds "
                    f"limit of {self.max_memory / 1024 / 1024:.1f}MB"
                )

    @property
    def peak_memory(self) -> int:
        """Peak resident memory seen, in bytes."""
        return self._peak_memory

    @property
    def peak_memory_mb(self) -> float:
        """Get peak memory usage in MB."""
        return self._peak_memory / 1024 / 1024


def get_memory_usage() -> int:
    """Get current memory usage in bytes."""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss
