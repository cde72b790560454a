"""
Point Tile Server

A FastAPI application serving the loaded point set as Mapbox Vector Tiles,
generated on request for ``/tiles/{z}/{x}/{y}``.
"""

import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from . import __version__
from .data_ingestion.point_loader import PointSet, PointSourceError, load_point_set
from .monitoring.metrics import MetricsCollector
from .tile_generation.addressing import TileAddressError, parse_tile_path
from .tile_generation.geometry_encoder import encode_points
from .tile_generation.tile_builder import TileSerializationError, build_tile
from .utils.config import Config
from .utils.logging_config import configure_logging

SERVICE_NAME = "point-tile-server"
TILE_MEDIA_TYPE = "application/x-protobuf"
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

logger = structlog.get_logger(__name__)


def create_app(
    point_set: PointSet,
    config: Optional[Config] = None,
    metrics: Optional[MetricsCollector] = None
) -> FastAPI:
    """
    Build the tile server application.

    Args:
        point_set: Frozen points shared by every request
        config: Server configuration; defaults are used when omitted
        metrics: Metrics collector; a fresh one is created when omitted
    """
    config = config or Config()
    metrics = metrics or MetricsCollector()
    metrics.set_gauge('points_loaded', len(point_set))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting point tile server",
            points=len(point_set),
            extent=config.extent,
            port=config.port
        )
        yield
        logger.info("Shutting down point tile server")

    app = FastAPI(
        title="Point Tile Server",
        description="Vector tiles generated on request from an in-memory point set",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.state.point_set = point_set
    app.state.config = config
    app.state.metrics = metrics

    @app.get("/")
    def root():
        """Service information."""
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "endpoints": {
                "tiles": "/tiles/{z}/{x}/{y}",
                "health": "/health",
                "metrics": "/metrics",
            },
            "layer": "points",
            "extent": config.extent,
        }

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "points_loaded": len(point_set),
        }

    @app.get("/metrics")
    def export_metrics():
        return Response(content=metrics.export_metrics(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/tiles/{tile_path:path}")
    def get_tile(tile_path: str):
        """
        Serve the point tile at ``tile_path`` (``z/x/y``).

        Runs on the framework's worker threadpool; the point set is read-only
        so requests need no locking.
        """
        start_time = time.perf_counter()

        try:
            tile = parse_tile_path(tile_path)
        except TileAddressError as e:
            logger.warning("Rejected tile request", path=tile_path, error=str(e))
            metrics.increment_counter('tile_requests_total', labels={'status': 'bad_request'})
            return PlainTextResponse("Invalid tile url", status_code=400)

        geometry = encode_points(point_set.locs, tile, config.extent)
        points_encoded = (len(geometry) - 1) // 2

        try:
            data = build_tile(geometry, config.extent)
        except TileSerializationError:
            logger.exception("Error generating tile", tile_id=tile.tile_id)
            metrics.increment_counter('tile_requests_total', labels={'status': 'error'})
            return PlainTextResponse("Error generating tile", status_code=500)

        duration = time.perf_counter() - start_time
        metrics.increment_counter('tile_requests_total', labels={'status': 'ok'})
        metrics.record_histogram('tile_generation_duration_seconds', duration)
        metrics.record_histogram('tile_points_encoded', points_encoded)

        logger.info(
            "Serving tile",
            path=tile_path,
            tile_id=tile.tile_id,
            points_encoded=points_encoded,
            size_bytes=len(data),
            duration_ms=round(duration * 1000, 2)
        )

        return Response(content=data, media_type=TILE_MEDIA_TYPE, headers=CORS_HEADERS)

    return app


def main() -> None:
    """Load configuration and points, then serve until interrupted."""
    try:
        config = Config.from_env()
    except ValueError as e:
        configure_logging()
        logger.error("Invalid configuration", error=str(e))
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)

    try:
        point_set = load_point_set(config.points)
    except PointSourceError as e:
        logger.error("Failed to load point set", error=str(e))
        sys.exit(1)

    app = create_app(point_set, config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
