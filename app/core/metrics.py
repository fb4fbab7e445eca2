from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Request, Response
from typing import Callable
import time
from app.core.logging import get_logger

logger = get_logger(__name__)

# Metrics definitions
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

ACTIVE_REQUESTS = Gauge(
    'http_requests_active',
    'Number of active HTTP requests'
)

GENERATION_REQUESTS = Counter(
    'description_generation_total',
    'Total description generation requests',
    ['status']
)

GENERATION_DURATION = Histogram(
    'description_generation_duration_seconds',
    'Remote description generation duration in seconds'
)


class MetricsMiddleware:
    """Middleware for collecting HTTP metrics."""

    def __init__(self, app: Callable):
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        ACTIVE_REQUESTS.inc()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration = time.time() - start_time
            method = scope["method"]
            # Route template keeps label cardinality bounded (/products/{product_id})
            route = scope.get("route")
            endpoint = getattr(route, "path", scope["path"])

            REQUEST_COUNT.labels(
                method=method,
                endpoint=endpoint,
                status_code=status_code
            ).inc()

            REQUEST_DURATION.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            ACTIVE_REQUESTS.dec()


def record_generation(status: str, duration: float):
    """Record a description generation attempt."""
    GENERATION_REQUESTS.labels(status=status).inc()
    GENERATION_DURATION.observe(duration)


async def get_metrics(request: Request) -> Response:
    """Get Prometheus metrics."""
    try:
        metrics_data = generate_latest()
        return Response(
            content=metrics_data,
            media_type=CONTENT_TYPE_LATEST
        )
    except Exception as e:
        logger.error("Failed to generate metrics", error=str(e))
        return Response(content="Error generating metrics", status_code=500)
