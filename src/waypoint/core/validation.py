"""
Schema validation for terrain matrices.

A terrain matrix is a non-empty list of non-empty rows of small integers,
one per cell, mapped onto TerrainType. The structural part of the check is
expressed as a JSON schema; rectangularity is checked separately because
JSON schema cannot relate the lengths of sibling arrays.
"""

from typing import Any, Dict, List, Sequence

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate as json_validate

from .enums import TerrainType
from .exceptions import InvalidDimensionError, InvalidTerrainError

TERRAIN_MATRIX_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "minItems": 1,
    "items": {
        "type": "array",
        "minItems": 1,
        "items": {
            "type": "integer",
            "minimum": min(TerrainType).value,
            "maximum": max(TerrainType).value,
        },
    },
}


def validate_terrain_matrix(matrix: Sequence[Sequence[int]]) -> List[List[int]]:
    """
    Validate a terrain matrix and return it as a list of row lists.

    Args:
        matrix: Rows of terrain values, ``matrix[y][x]``

    Returns:
        A copy of the matrix as plain lists

    Raises:
        InvalidDimensionError: If the matrix is empty, malformed or ragged
        InvalidTerrainError: If a cell value has no terrain type
    """
    if matrix is None or isinstance(matrix, (str, bytes)):
        raise InvalidDimensionError("terrain matrix must be a sequence of rows")
    try:
        rows = [list(row) for row in matrix]
    except TypeError as e:
        raise InvalidDimensionError(f"terrain matrix rows must be sequences: {e}")

    try:
        json_validate(instance=rows, schema=TERRAIN_MATRIX_SCHEMA)
    except JsonSchemaError as e:
        location = list(e.absolute_path)
        if len(location) == 2:
            y, x = location
            raise InvalidTerrainError(f"invalid terrain value at ({x}, {y}): {e.message}")
        raise InvalidDimensionError(f"malformed terrain matrix: {e.message}")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if len(row) != width:
            raise InvalidDimensionError(
                f"terrain matrix is not rectangular: row {y} has {len(row)} cells, "
                f"expected {width}"
            )
    return rows
