"""
Monitoring Module

Prometheus metrics for the tile server.
"""

from .metrics import MetricsCollector

__all__ = ["MetricsCollector"]
