"""
Tile Builder

Wraps a point geometry command stream into a single-layer Mapbox Vector Tile
and serializes it with the protobuf schema shipped by ``mapbox-vector-tile``.
"""

from typing import Sequence

import structlog
from google.protobuf.message import EncodeError
from mapbox_vector_tile.Mapbox import vector_tile_pb2

from .geometry_encoder import DEFAULT_EXTENT

LAYER_NAME = "points"
LAYER_VERSION = 1

logger = structlog.get_logger(__name__)


class TileSerializationError(RuntimeError):
    """Raised when a tile cannot be serialized."""


def build_tile(geometry: Sequence[int], extent: int = DEFAULT_EXTENT) -> bytes:
    """
    Serialize a point geometry stream as a vector tile.

    The tile holds one layer named ``points`` with a single POINT feature
    carrying ``geometry`` and no tags.

    Args:
        geometry: Command stream produced by ``encode_points``
        extent: Coordinate resolution per tile side

    Returns:
        Serialized tile bytes

    Raises:
        TileSerializationError: if the protobuf message cannot be built or
            serialized
    """
    try:
        tile = vector_tile_pb2.tile()
        layer = tile.layers.add()
        layer.version = LAYER_VERSION
        layer.name = LAYER_NAME
        layer.extent = extent

        feature = layer.features.add()
        feature.type = vector_tile_pb2.tile.Point
        feature.geometry.extend(geometry)

        return tile.SerializeToString()
    except (EncodeError, TypeError, ValueError) as e:
        logger.error("Tile serialization failed", error=str(e), extent=extent)
        raise TileSerializationError(f"Tile serialization failed: {e}") from e
