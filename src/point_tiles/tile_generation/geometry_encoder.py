"""
Point Geometry Encoder

Encodes loc-space points into the integer command stream of the Mapbox Vector
Tile geometry format.

A point layer is a single MoveTo command followed by one (dx, dy) pair per
point. Each pair is the zig-zag encoded offset from the previously emitted
point, the first one being relative to the tile origin.
"""

import math
from enum import IntEnum
from typing import Iterable, List, Sequence, Tuple

from .addressing import BoundingBox, tile_bounding_box
from .projection import Loc, TileAddress, loc_to_tile_local

DEFAULT_EXTENT = 4096


class CommandId(IntEnum):
    """Geometry command identifiers."""
    MOVE_TO = 1
    LINE_TO = 2
    CLOSE_PATH = 7


def command_integer(command_id: int, count: int) -> int:
    return (command_id & 0x7) | (count << 3)


def move_to(count: int) -> int:
    return command_integer(CommandId.MOVE_TO, count)


def decode_command(value: int) -> Tuple[int, int]:
    """Split a command integer into ``(command_id, count)``."""
    return value & 0x7, value >> 3


def zigzag_encode(value: int) -> int:
    """Zig-zag encode a signed 32-bit integer into an unsigned one."""
    return ((value << 1) ^ (value >> 31)) & 0xFFFFFFFF


def zigzag_decode(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def filter_points(points: Iterable[Loc], bbox: BoundingBox) -> List[Loc]:
    """Points inside ``bbox``, in input order."""
    return [point for point in points if bbox.contains(point.x, point.y)]


def encode_points(
    points: Sequence[Loc],
    tile: TileAddress,
    extent: int = DEFAULT_EXTENT
) -> List[int]:
    """
    Encode the points falling inside ``tile`` as a point geometry stream.

    Args:
        points: Loc-space points; their order drives the delta chain
        tile: Requested tile
        extent: Coordinate resolution per tile side

    Returns:
        ``[move_to(n), dx1, dy1, ..., dxn, dyn]``; ``[move_to(0)]`` when no
        point falls inside the tile
    """
    survivors = filter_points(points, tile_bounding_box(tile))

    geometry = [move_to(len(survivors))]
    previous_x = 0
    previous_y = 0

    for point in survivors:
        local = loc_to_tile_local(point, tile)
        tile_x = math.floor(extent * local.x + 0.5)
        tile_y = math.floor(extent * local.y + 0.5)
        geometry.append(zigzag_encode(tile_x - previous_x))
        geometry.append(zigzag_encode(tile_y - previous_y))
        previous_x = tile_x
        previous_y = tile_y

    return geometry
