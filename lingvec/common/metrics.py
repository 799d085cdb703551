"""Metrics collection for lingvec.

Provides a thin convenience wrapper around ``prometheus_client`` so the
store and the service record HTTP, lookup, search, and load metrics with
consistent label sets.

Design notes
- Metrics and labels are predeclared to keep cardinality bounded
- A single registry is kept per collector (can be injected for tests)
- ``measure_time`` offers quick timing instrumentation through logs
"""

import time
from functools import wraps
from typing import Any, Callable, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name of the owning process
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.lookup_requests = Counter(
            'lingvec_lookup_requests_total',
            'Total embedding lookup requests',
            ['language'],
            registry=self.registry
        )

        self.lookup_words = Counter(
            'lingvec_lookup_words_total',
            'Words submitted to lookup, partitioned by vocabulary outcome',
            ['language', 'outcome'],
            registry=self.registry
        )

        self.lookup_duration = Histogram(
            'lingvec_lookup_duration_seconds',
            'Embedding lookup duration',
            ['language'],
            registry=self.registry
        )

        self.search_requests = Counter(
            'lingvec_neighbor_search_requests_total',
            'Total nearest-neighbor search requests',
            ['source_language', 'target_language'],
            registry=self.registry
        )

        self.search_duration = Histogram(
            'lingvec_neighbor_search_duration_seconds',
            'Nearest-neighbor search duration',
            ['source_language', 'target_language'],
            registry=self.registry
        )

        self.model_loads = Counter(
            'lingvec_model_loads_total',
            'Language model load attempts by outcome',
            ['language', 'status'],
            registry=self.registry
        )

        self.languages_loaded = Gauge(
            'lingvec_languages_loaded',
            'Number of language tables currently held in memory',
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_lookup(self, language: str, found: int, missing: int, duration: float) -> None:
        """Record a lookup batch and its vocabulary hit/miss counts."""
        self.lookup_requests.labels(language=language).inc()
        self.lookup_words.labels(language=language, outcome="found").inc(found)
        self.lookup_words.labels(language=language, outcome="missing").inc(missing)
        self.lookup_duration.labels(language=language).observe(duration)

    def record_search(self, source_language: str, target_language: str, duration: float) -> None:
        """Record nearest-neighbor search metrics."""
        self.search_requests.labels(
            source_language=source_language,
            target_language=target_language
        ).inc()
        self.search_duration.labels(
            source_language=source_language,
            target_language=target_language
        ).observe(duration)

    def record_model_load(self, language: str, status: str) -> None:
        """Record a load attempt; ``status`` is ``success`` or ``failure``."""
        self.model_loads.labels(language=language, status=status).inc()

    def set_languages_loaded(self, count: int) -> None:
        self.languages_loaded.set(count)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create the process-wide metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
    return _metrics_collector


def measure_time(operation: str, **labels: Any) -> Callable:
    """Decorator to log function execution time.

    Example
    >>> @measure_time("load_table", source="local")
    ... def load(code):
    ...     ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                logger.info(
                    f"Operation {operation} completed",
                    operation=operation,
                    duration_ms=duration * 1000,
                    **labels
                )
                return result
            except Exception as e:
                duration = time.time() - start_time
                logger.error(
                    f"Operation {operation} failed",
                    operation=operation,
                    duration_ms=duration * 1000,
                    error=str(e),
                    **labels
                )
                raise
        return wrapper
    return decorator
