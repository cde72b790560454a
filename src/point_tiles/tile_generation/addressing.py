"""
Tile Addressing

Parses ``<z>/<x>/<y>`` tile paths into ``TileAddress`` values and derives the
loc-space bounding box of a tile.
"""

import math
import re
from dataclasses import dataclass
from typing import Tuple

from .projection import TileAddress, tile_to_loc

TILE_PATH_PATTERN = re.compile(r"(?P<z>[0-9]+)/(?P<x>[0-9]+)/(?P<y>[0-9]+)")

UINT32_MAX = 2 ** 32 - 1


class TileAddressError(ValueError):
    """Raised when a path does not hold a valid ``z/x/y`` tile address."""


@dataclass(frozen=True)
class BoundingBox:
    """Loc-space extent of a tile, as ``(min, max)`` ranges per axis."""
    x_range: Tuple[float, float]
    y_range: Tuple[float, float]

    def contains(self, x: float, y: float) -> bool:
        """Half-open test: points on a max edge belong to the next tile."""
        return (
            self.x_range[0] <= x < self.x_range[1]
            and self.y_range[0] <= y < self.y_range[1]
        )


def _parse_uint32(value: str, name: str) -> int:
    number = int(value)
    if number > UINT32_MAX:
        raise TileAddressError(f"Tile {name} out of range: {value}")
    return number


def parse_tile_path(path: str) -> TileAddress:
    """
    Parse a tile path such as ``"3/4/2"``.

    The first ``z/x/y`` integer triplet found in ``path`` is used, so
    ``"3/4/2.pbf"`` is accepted too. Components must fit in an unsigned
    32-bit integer. Columns and rows are not checked against the zoom level;
    an out-of-range address simply matches no points.

    Raises:
        TileAddressError: if no triplet is found or a component overflows
    """
    match = TILE_PATH_PATTERN.search(path)
    if match is None:
        raise TileAddressError(f"Unable to parse path as tile: {path!r}")

    x = _parse_uint32(match.group("x"), "x")
    y = _parse_uint32(match.group("y"), "y")
    level = _parse_uint32(match.group("z"), "z")

    try:
        scale = math.ldexp(1.0, level)
    except OverflowError:
        scale = math.inf

    return TileAddress(x=float(x), y=float(y), z=scale)


def tile_bounding_box(tile: TileAddress) -> BoundingBox:
    """
    Loc-space bounding box of a tile.

    Tile rows grow downwards while loc-space y grows upwards, so the top edge
    comes from the tile itself and the bottom edge from the row below it.
    """
    upper = tile_to_loc(tile)
    lower = tile_to_loc(TileAddress(x=tile.x, y=tile.y + 1, z=tile.z))
    return BoundingBox(
        x_range=(upper.x, upper.x + 1 / tile.z),
        y_range=(lower.y, upper.y)
    )
