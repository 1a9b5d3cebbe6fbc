"""
Terrain colors for visualizers.

The search core carries no rendering state; a visualizer receives this
mapping and looks colors up itself. Colors are RGBA byte tuples.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

from .core.enums import TerrainType

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)

TERRAIN_COLORS: Mapping[TerrainType, RGBA] = MappingProxyType(
    {
        TerrainType.OPEN: WHITE,
        TerrainType.BLOCKED: (0, 0, 0, 255),
        TerrainType.LIGHT_TERRAIN: (124, 194, 78, 255),
        TerrainType.MEDIUM_TERRAIN: (252, 255, 52, 255),
        TerrainType.HEAVY_TERRAIN: (255, 129, 12, 255),
    }
)


def color_for(terrain_type: TerrainType, palette: Mapping[TerrainType, RGBA] = TERRAIN_COLORS) -> RGBA:
    """Color of a terrain type, white when the palette has no entry."""
    return palette.get(terrain_type, WHITE)
