"""
Weighted 8-directional grid graph.

This module provides the Grid class, which turns a terrain matrix into a
fixed arena of cells and wires each traversable cell to its traversable
neighbors. The grid also supplies the distance metrics used both as edge
lengths and as search heuristics.

The grid's dimensions and adjacency never change after construction; only
the per-cell search fields are mutated, by one search run at a time.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .enums import DIRECTIONS, TerrainType
from .exceptions import CellNotFoundError
from .models import Cell, Coordinates
from .validation import validate_terrain_matrix

logger = logging.getLogger(__name__)

# Cost of a diagonal move relative to a straight one
DIAGONAL_COST = 1.4


class Grid:
    """
    Fixed-size grid of cells with precomputed adjacency.

    Cells live in a flat arena indexed by ``y * width + x``; predecessor
    links between cells are stored as coordinates into this arena.

    Attributes:
        width (int): Number of columns
        height (int): Number of rows
        walls (List[Cell]): Blocked cells in arena order
    """

    def __init__(self, terrain_matrix: Sequence[Sequence[int]]):
        """
        Build the grid from a terrain matrix.

        Args:
            terrain_matrix: Rows of terrain values, ``terrain_matrix[y][x]``,
                each value an ordinal of TerrainType

        Raises:
            InvalidDimensionError: If the matrix is empty or not rectangular
            InvalidTerrainError: If a value does not name a terrain type
        """
        rows = validate_terrain_matrix(terrain_matrix)
        self._height = len(rows)
        self._width = len(rows[0])
        self._cells: List[Cell] = []
        self.walls: List[Cell] = []

        for y in range(self._height):
            for x in range(self._width):
                cell = Cell(x, y, TerrainType(rows[y][x]))
                self._cells.append(cell)
                if cell.is_blocked:
                    self.walls.append(cell)

        for cell in self._cells:
            if not cell.is_blocked:
                cell.neighbors = self._compute_neighbors(cell.x, cell.y)

        logger.debug(
            f"Built {self._width}x{self._height} grid with {len(self.walls)} blocked cells"
        )

    @classmethod
    def build(cls, terrain_matrix: Sequence[Sequence[int]]) -> "Grid":
        """Build a grid from a terrain matrix."""
        return cls(terrain_matrix)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: object) -> bool:
        """Check whether a cell object belongs to this grid."""
        if not isinstance(cell, Cell) or not self.is_in_bounds(cell.x, cell.y):
            return False
        return self._cells[self._index(cell.x, cell.y)] is cell

    def __repr__(self) -> str:
        return f"Grid(width={self._width}, height={self._height})"

    def _index(self, x: int, y: int) -> int:
        return y * self._width + x

    def _compute_neighbors(self, x: int, y: int) -> Tuple[Cell, ...]:
        neighbors = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if self.is_in_bounds(nx, ny):
                candidate = self._cells[self._index(nx, ny)]
                if not candidate.is_blocked:
                    neighbors.append(candidate)
        return tuple(neighbors)

    def is_in_bounds(self, x: int, y: int) -> bool:
        """Check whether (x, y) lies within the grid."""
        return 0 <= x < self._width and 0 <= y < self._height

    def get_cell(self, x: int, y: int) -> Cell:
        """
        Get the cell at (x, y).

        Raises:
            CellNotFoundError: If (x, y) is outside the grid
        """
        if not self.is_in_bounds(x, y):
            raise CellNotFoundError(
                f"Cell ({x}, {y}) is outside the {self._width}x{self._height} grid"
            )
        return self._cells[self._index(x, y)]

    def find_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get the cell at (x, y), or None when out of bounds."""
        if not self.is_in_bounds(x, y):
            return None
        return self._cells[self._index(x, y)]

    def cell_at(self, coordinates: Coordinates) -> Cell:
        """Get the cell addressed by an (x, y) tuple."""
        x, y = coordinates
        return self.get_cell(x, y)

    def cells(self) -> Iterator[Cell]:
        """Iterate over all cells in arena order."""
        return iter(self._cells)

    def reset_search_state(self) -> None:
        """Reset cost, predecessor and priority of every cell."""
        for cell in self._cells:
            cell.reset()

    @staticmethod
    def distance(source: Cell, target: Cell) -> float:
        """
        Octile distance between two cells.

        Diagonal steps are charged 1.4 and straight steps 1.
        """
        dx = abs(source.x - target.x)
        dy = abs(source.y - target.y)
        diagonal_steps = min(dx, dy)
        straight_steps = max(dx, dy) - diagonal_steps
        return DIAGONAL_COST * diagonal_steps + straight_steps

    @staticmethod
    def manhattan_distance(source: Cell, target: Cell) -> int:
        """Taxicab distance between two cells."""
        return abs(source.x - target.x) + abs(source.y - target.y)
