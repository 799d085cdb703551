"""Metrics collection facade for the embedding service.

Re-exports the shared metrics utilities so the service imports from a
stable local path (``app.runtime.metrics``).

Key APIs:
- ``get_metrics_collector(service_name)``: return the process-wide collector.
- ``MetricsCollector``: record request, lookup, search, and load metrics.
"""

from lingvec.common.metrics import MetricsCollector, get_metrics_collector

__all__ = ["MetricsCollector", "get_metrics_collector"]
