"""
Metrics Collection

Prometheus metrics for the tile server: request outcomes, tile generation
latency, encoded point counts and the size of the loaded point set.

Each collector owns its own ``CollectorRegistry`` so several collectors (one
per application, one per test) can coexist in a process.
"""

from typing import Dict, List, Optional, Union

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

POINT_COUNT_BUCKETS = (0, 1, 10, 100, 1000, 10000, 100000, float("inf"))


class MetricsCollector:
    """Registry-backed counters, histograms and gauges addressed by name."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.logger = structlog.get_logger(collector_type="MetricsCollector")

        self.counters: Dict[str, Counter] = {}
        self.histograms: Dict[str, Histogram] = {}
        self.gauges: Dict[str, Gauge] = {}

        self._create_metric(
            'counter', 'tile_requests_total',
            'Total number of tile requests',
            ['status']
        )
        self._create_metric(
            'histogram', 'tile_generation_duration_seconds',
            'Duration of tile generation'
        )
        self._create_metric(
            'histogram', 'tile_points_encoded',
            'Number of points encoded per tile',
            buckets=POINT_COUNT_BUCKETS
        )
        self._create_metric(
            'gauge', 'points_loaded',
            'Number of points in the loaded point set'
        )

    def _create_metric(
        self,
        metric_type: str,
        name: str,
        description: str,
        labels: List[str] = None,
        buckets=None
    ) -> None:
        labels = labels or []
        if metric_type == 'counter':
            self.counters[name] = Counter(name, description, labels, registry=self.registry)
        elif metric_type == 'histogram':
            kwargs = {'buckets': buckets} if buckets else {}
            self.histograms[name] = Histogram(
                name, description, labels, registry=self.registry, **kwargs
            )
        elif metric_type == 'gauge':
            self.gauges[name] = Gauge(name, description, labels, registry=self.registry)
        else:
            raise ValueError(f"Unknown metric type: {metric_type}")

    def increment_counter(
        self,
        name: str,
        value: Union[int, float] = 1,
        labels: Dict[str, str] = None
    ) -> None:
        """Increment a counter; unknown names are logged and ignored."""
        counter = self.counters.get(name)
        if counter is None:
            self.logger.warning("Unknown counter", metric_name=name)
            return
        (counter.labels(**labels) if labels else counter).inc(value)

    def record_histogram(
        self,
        name: str,
        value: Union[int, float],
        labels: Dict[str, str] = None
    ) -> None:
        """Observe a histogram value; unknown names are logged and ignored."""
        histogram = self.histograms.get(name)
        if histogram is None:
            self.logger.warning("Unknown histogram", metric_name=name)
            return
        (histogram.labels(**labels) if labels else histogram).observe(value)

    def set_gauge(
        self,
        name: str,
        value: Union[int, float],
        labels: Dict[str, str] = None
    ) -> None:
        """Set a gauge; unknown names are logged and ignored."""
        gauge = self.gauges.get(name)
        if gauge is None:
            self.logger.warning("Unknown gauge", metric_name=name)
            return
        (gauge.labels(**labels) if labels else gauge).set(value)

    def get_sample_value(self, name: str, labels: Dict[str, str] = None) -> Optional[float]:
        """Current value of a sample, e.g. ``tile_requests_total``."""
        return self.registry.get_sample_value(name, labels or {})

    def export_metrics(self) -> bytes:
        """Prometheus text exposition of every metric in the registry."""
        return generate_latest(self.registry)
