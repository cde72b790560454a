"""
Coordinate Projections

Converts points between the three coordinate spaces used by the tile server:

- geographic space (longitude/latitude in degrees)
- "loc" space, the Braun projection of a geographic point
- tile-local space, where 0..1 spans a single tile along each axis

Longitude stays linear through every step. The vertical axis goes through the
Braun projection first and a web-Mercator scaling second, which reproduces the
latitude compression of standard web map tiles.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """A geographic point in degrees."""
    longitude: float
    latitude: float


@dataclass(frozen=True)
class Loc:
    """A point in loc space, or in tile-local space after projection."""
    x: float
    y: float


@dataclass(frozen=True)
class TileAddress:
    """
    A tile column/row at a given scale.

    ``z`` is the linear scale ``2 ** zoom``, not the zoom level itself.
    """
    x: float
    y: float
    z: float

    @property
    def zoom(self) -> int:
        """Zoom level recovered from the scale (-1 for a non-finite scale)."""
        if math.isinf(self.z):
            return -1
        return int(math.log2(self.z))

    @property
    def tile_id(self) -> str:
        return f"{self.zoom}/{int(self.x)}/{int(self.y)}"


def geo_to_loc(point: GeoPoint) -> Loc:
    """Braun projection of a geographic point."""
    return Loc(
        x=point.longitude / 360,
        y=math.tan(point.latitude / 360 * math.pi)
    )


def loc_to_geo(loc: Loc) -> GeoPoint:
    """Inverse Braun projection."""
    return GeoPoint(
        longitude=loc.x * 360,
        latitude=math.atan(loc.y) * 360 / math.pi
    )


def loc_to_tile_local(loc: Loc, tile: TileAddress) -> Loc:
    """
    Position of a loc-space point relative to a tile.

    The result is in tile units: (0, 0) is the tile's top-left corner and
    (1, 1) its bottom-right one. Callers scale it by the layer extent.
    ``loc.y`` must lie strictly inside (-1, 1).
    """
    mercator_y = math.log((1 + loc.y) / (1 - loc.y)) / math.pi / 2
    return Loc(
        x=(loc.x + 0.5) * tile.z - tile.x,
        y=(-mercator_y + 0.5) * tile.z - tile.y
    )


def tile_to_loc(tile: TileAddress) -> Loc:
    """Loc-space position of a tile's top-left corner."""
    mercator_y = -(tile.y / tile.z - 0.5)
    return Loc(
        x=tile.x / tile.z - 0.5,
        y=1 - 2 / (math.exp(mercator_y * math.pi * 2) + 1)
    )
