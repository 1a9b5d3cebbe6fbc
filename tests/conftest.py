"""Shared test fixtures."""

import pytest

from waypoint.core.grid import Grid


@pytest.fixture
def open_matrix():
    """5x5 matrix with no obstacles."""
    return [[0] * 5 for _ in range(5)]


@pytest.fixture
def open_grid(open_matrix) -> Grid:
    """Fixture providing a 5x5 all-Open grid."""
    return Grid.build(open_matrix)


@pytest.fixture
def walled_grid() -> Grid:
    """
    Fixture providing a grid split in two by a Blocked column at x=2.

    S . # . G
    . . # . .
    . . # . .
    """
    return Grid.build(
        [
            [0, 0, 1, 0, 0],
            [0, 0, 1, 0, 0],
            [0, 0, 1, 0, 0],
        ]
    )


@pytest.fixture
def heavy_corridor_grid() -> Grid:
    """
    Fixture providing a short HeavyTerrain corridor and a longer Open detour.

    Rows are listed with y increasing downwards:

        y=0:  S H H H G
        y=1:  . # # # .
        y=2:  . . . . .

    The corridor S-H-H-H-G has 4 edges and costs 16; the detour through
    row 2 has 6 edges and costs 6.8.
    """
    return Grid.build(
        [
            [0, 4, 4, 4, 0],
            [0, 1, 1, 1, 0],
            [0, 0, 0, 0, 0],
        ]
    )
