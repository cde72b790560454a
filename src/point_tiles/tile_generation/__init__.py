"""
Tile Generation Module

Builds point-layer Mapbox Vector Tiles on request:

- projection between geographic, loc and tile-local coordinates
- ``z/x/y`` tile address parsing and tile bounding boxes
- MoveTo / zig-zag delta geometry encoding
- protobuf serialization of the single ``points`` layer
"""

from .addressing import BoundingBox, TileAddressError, parse_tile_path, tile_bounding_box
from .geometry_encoder import DEFAULT_EXTENT, encode_points
from .projection import GeoPoint, Loc, TileAddress, geo_to_loc, loc_to_geo
from .tile_builder import TileSerializationError, build_tile

__all__ = [
    "BoundingBox",
    "DEFAULT_EXTENT",
    "GeoPoint",
    "Loc",
    "TileAddress",
    "TileAddressError",
    "TileSerializationError",
    "build_tile",
    "encode_points",
    "geo_to_loc",
    "loc_to_geo",
    "parse_tile_path",
    "tile_bounding_box",
]
