"""Configuration and logging helpers."""

from .config import Config, PointSourceConfig
from .logging_config import configure_logging

__all__ = ["Config", "PointSourceConfig", "configure_logging"]
