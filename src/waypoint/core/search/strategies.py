"""
Frontier expansion rules for the four search strategies.

Every strategy expands one dequeued cell at a time, visiting its neighbors
in compass order and skipping neighbors that are already explored. They
differ only in when a neighbor's cost and breadcrumb are overwritten and in
the key it is queued under:

- Breadth-first: first discovery wins, key is a discovery counter (FIFO)
- Dijkstra: cheaper route wins, key is the cost so far
- Greedy best-first: first discovery wins, key is the heuristic to the goal
- A*: cheaper route wins, key is cost so far plus heuristic

Strategies that keep cheaper routes re-key a neighbor that is already in
the frontier (decrease-key), so the frontier always reflects the best
known costs.
"""

import logging
from abc import ABC, abstractmethod
from typing import AbstractSet, ClassVar, Dict, List, Type

from ..enums import SearchMode
from ..grid import Grid
from ..models import Cell
from .queue import PriorityQueue
from .utils import Heuristic, edge_weight, is_better_cost

logger = logging.getLogger(__name__)


class ExpansionStrategy(ABC):
    """Abstract base class for frontier expansion rules."""

    mode: ClassVar[SearchMode]

    def __init__(self, grid: Grid, goal: Cell, heuristic: Heuristic):
        """Initialize strategy for one run."""
        self.grid = grid
        self.goal = goal
        self.heuristic = heuristic

    @abstractmethod
    def expand(
        self,
        current: Cell,
        frontier: PriorityQueue[Cell],
        explored: AbstractSet[Cell],
    ) -> List[Cell]:
        """
        Expand the frontier from ``current``.

        Args:
            current: Cell just taken off the frontier
            frontier: Queue of discovered, unexpanded cells
            explored: Cells already expanded, ``current`` included

        Returns:
            Cells newly added to the frontier, in compass order
        """
        pass

    def _arrive(self, current: Cell, neighbor: Cell) -> None:
        neighbor.cost_so_far = current.cost_so_far + edge_weight(self.grid, current, neighbor)
        neighbor.predecessor = current.coordinates


class BreadthFirstStrategy(ExpansionStrategy):
    """Unweighted breadth-first search."""

    mode = SearchMode.BREADTH_FIRST

    def expand(self, current, frontier, explored):
        added = []
        for neighbor in current.neighbors:
            if neighbor in explored or neighbor in frontier:
                continue
            self._arrive(current, neighbor)
            # Cells discovered during the same expansion share a key and
            # leave in insertion order
            neighbor.priority = len(explored)
            frontier.enqueue(neighbor)
            added.append(neighbor)
        return added


class GreedyBestFirstStrategy(ExpansionStrategy):
    """Greedy best-first search ordered by estimated distance to the goal."""

    mode = SearchMode.GREEDY_BEST_FIRST

    def expand(self, current, frontier, explored):
        added = []
        for neighbor in current.neighbors:
            if neighbor in explored or neighbor in frontier:
                continue
            self._arrive(current, neighbor)
            neighbor.priority = self.heuristic(neighbor, self.goal)
            frontier.enqueue(neighbor)
            added.append(neighbor)
        return added


class RelaxingStrategy(ExpansionStrategy):
    """Base for strategies that re-route neighbors through cheaper paths."""

    @abstractmethod
    def priority_for(self, cell: Cell) -> float:
        """Frontier key of a cell given its current cost so far."""
        pass

    def expand(self, current, frontier, explored):
        added = []
        for neighbor in current.neighbors:
            if neighbor in explored:
                continue

            candidate = current.cost_so_far + edge_weight(self.grid, current, neighbor)
            relaxed = is_better_cost(candidate, neighbor.cost_so_far)
            if relaxed:
                logger.debug(
                    f"Relaxing {neighbor.coordinates}: {neighbor.cost_so_far} -> {candidate} "
                    f"via {current.coordinates}"
                )
                neighbor.cost_so_far = candidate
                neighbor.predecessor = current.coordinates

            if neighbor not in frontier:
                neighbor.priority = self.priority_for(neighbor)
                frontier.enqueue(neighbor)
                added.append(neighbor)
            elif relaxed:
                neighbor.priority = self.priority_for(neighbor)
                frontier.update(neighbor)
        return added


class DijkstraStrategy(RelaxingStrategy):
    """Dijkstra's algorithm, ordered by cost from the start."""

    mode = SearchMode.DIJKSTRA

    def priority_for(self, cell):
        return cell.cost_so_far


class AStarStrategy(RelaxingStrategy):
    """A* search, ordered by cost from the start plus estimated cost to the goal."""

    mode = SearchMode.A_STAR

    def priority_for(self, cell):
        return cell.cost_so_far + self.heuristic(cell, self.goal)


STRATEGIES: Dict[SearchMode, Type[ExpansionStrategy]] = {
    strategy.mode: strategy
    for strategy in (
        BreadthFirstStrategy,
        DijkstraStrategy,
        GreedyBestFirstStrategy,
        AStarStrategy,
    )
}


def create_strategy(
    mode: SearchMode, grid: Grid, goal: Cell, heuristic: Heuristic
) -> ExpansionStrategy:
    """Instantiate the expansion rule for a search mode."""
    return STRATEGIES[SearchMode(mode)](grid, goal, heuristic)
