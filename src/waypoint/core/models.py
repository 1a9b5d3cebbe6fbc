"""
Cell model for the search grid.

A Cell holds the per-position search state: its terrain, its coordinates,
the cheapest known cost from the start, a breadcrumb back to the cell it
was reached from, and the key it is ordered by in the frontier.

Cells compare and hash by identity. Two cells with the same coordinates
on different grids are different cells.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .enums import TerrainType

Coordinates = Tuple[int, int]


@dataclass(eq=False)
class Cell:
    """
    A single position in the grid.

    Attributes:
        x (int): Column index, fixed after construction
        y (int): Row index, fixed after construction
        terrain_type (TerrainType): Terrain of the cell
        neighbors (Tuple[Cell, ...]): Non-blocked adjacent cells in compass
            order, assigned once by the grid
        cost_so_far (float): Cheapest known cost from the start cell
        predecessor (Optional[Coordinates]): Coordinates of the cell the
            cheapest known path arrives from
        priority (float): Frontier ordering key, meaning depends on strategy
    """

    x: int
    y: int
    terrain_type: TerrainType = TerrainType.OPEN
    neighbors: Tuple["Cell", ...] = field(default=(), repr=False)
    cost_so_far: float = field(default=math.inf, repr=False)
    predecessor: Optional[Coordinates] = field(default=None, repr=False)
    priority: float = field(default=0.0, repr=False)

    def __post_init__(self):
        """Validate coordinates and coerce terrain."""
        if not isinstance(self.x, int) or not isinstance(self.y, int):
            raise TypeError("cell coordinates must be integers")
        if self.x < 0 or self.y < 0:
            raise ValueError("cell coordinates must be non-negative")
        self.terrain_type = TerrainType(self.terrain_type)

    @property
    def coordinates(self) -> Coordinates:
        """(x, y) identity of the cell."""
        return (self.x, self.y)

    @property
    def position(self) -> Tuple[float, float, float]:
        """Position in render space, the grid lying on the x/z plane."""
        return (float(self.x), 0.0, float(self.y))

    @property
    def is_blocked(self) -> bool:
        return self.terrain_type is TerrainType.BLOCKED

    def reset(self) -> None:
        """Clear the search fields left behind by a previous run."""
        self.cost_so_far = math.inf
        self.predecessor = None
        self.priority = 0.0
