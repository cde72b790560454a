"""
Data Ingestion Module

Loads the point features served by the tile server.
"""

from .point_loader import PointSet, PointSourceError, load_point_set

__all__ = ["PointSet", "PointSourceError", "load_point_set"]
