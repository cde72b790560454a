#!/usr/bin/env python3
"""
Point Tile Server

Serves the points of ``POINTS_CSV`` as Mapbox Vector Tiles on
``/tiles/{z}/{x}/{y}``. Configuration comes from environment variables, see
``point_tiles.utils.config``.
"""

from point_tiles.server import main

if __name__ == "__main__":
    main()
