"""
Point Tile Server

Serves a static set of geographic point features as Mapbox Vector Tiles,
generated on request for standard ``z/x/y`` web map tile addresses.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
