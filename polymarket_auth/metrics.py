"""
Prometheus metrics for monitoring.

Counts authentication artifacts produced by the core and the outcome
of authenticated requests. Disabled until configure_metrics() is called.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, start_http_server

logger = logging.getLogger(__name__)


class Metrics:
    """
    Prometheus metrics collector.

    Tracks:
    - Auth headers built per level
    - Orders signed per side
    - API requests per method/endpoint/status
    - Auth failures reported by the exchange
    """

    def __init__(
        self,
        enabled: bool = True,
        port: Optional[int] = None,
        registry: Optional[CollectorRegistry] = None
    ):
        """
        Initialize metrics.

        Args:
            enabled: Enable metrics collection
            port: Start a metrics HTTP server on this port (None = no server)
            registry: Registry to register into (private registry if None)
        """
        self.enabled = enabled
        self.registry = registry or CollectorRegistry()

        if not self.enabled:
            return

        self.headers_built = Counter(
            'polymarket_auth_headers_built_total',
            'Authentication header sets built',
            ['level'],
            registry=self.registry
        )

        self.orders_signed = Counter(
            'polymarket_orders_signed_total',
            'Orders signed',
            ['side'],
            registry=self.registry
        )

        self.api_requests = Counter(
            'polymarket_api_requests_total',
            'Total API requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.auth_failures = Counter(
            'polymarket_auth_failures_total',
            'Requests rejected by the exchange for authentication reasons',
            ['level'],
            registry=self.registry
        )

        if port is not None:
            try:
                start_http_server(port, registry=self.registry)
                logger.info(f"Metrics server started on port {port}")
            except OSError as e:
                logger.error(f"Failed to start metrics server: {e}")

    def track_headers(self, level) -> None:
        """Record one header set built at the given AuthLevel."""
        if self.enabled:
            self.headers_built.labels(level=level.name).inc()

    def track_order_signed(self, side: str) -> None:
        """Record order signing."""
        if self.enabled:
            self.orders_signed.labels(side=side).inc()

    def track_api_request(self, method: str, endpoint: str, status: str) -> None:
        """Record API request."""
        if self.enabled:
            self.api_requests.labels(method=method, endpoint=endpoint, status=status).inc()

    def track_auth_failure(self, level) -> None:
        """Record a 401/403 from the exchange."""
        if self.enabled:
            self.auth_failures.labels(level=level.name).inc()


# Global metrics instance
_metrics: Optional[Metrics] = None


def get_metrics() -> Metrics:
    """Get the active metrics instance (disabled collector if never configured)."""
    global _metrics
    if _metrics is None:
        _metrics = Metrics(enabled=False)
    return _metrics


def configure_metrics(
    enabled: bool = True,
    port: Optional[int] = None,
    registry: Optional[CollectorRegistry] = None
) -> Metrics:
    """Replace the active metrics instance."""
    global _metrics
    _metrics = Metrics(enabled=enabled, port=port, registry=registry)
    return _metrics
