"""Performance monitoring middleware for tracking request metrics."""

import logging
import time
from typing import Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE = "<unmatched>"


class PerformanceMetrics:
    """Request counters shared by the middleware and /health/metrics."""

    def __init__(self, slow_threshold: float = 10.0, very_slow_threshold: float = 30.0):
        self.slow_threshold = slow_threshold
        self.very_slow_threshold = very_slow_threshold
        self.reset()

    def reset(self) -> None:
        self.request_count = 0
        self.total_duration = 0.0
        self.slow_requests = 0
        self.very_slow_requests = 0
        self.errors = 0
        self.by_path: Dict[str, int] = {}

    def record_request(self, path: str, duration: float, is_error: bool = False) -> None:
        self.request_count += 1
        self.total_duration += duration
        self.by_path[path] = self.by_path.get(path, 0) + 1

        if is_error:
            self.errors += 1

        if duration >= self.very_slow_threshold:
            self.very_slow_requests += 1
        elif duration >= self.slow_threshold:
            self.slow_requests += 1

    def get_summary(self) -> dict:
        count = self.request_count
        return {
            "total_requests": count,
            "average_duration_ms": round((self.total_duration / count) * 1000, 2) if count else 0.0,
            "slow_requests": self.slow_requests,
            "very_slow_requests": self.very_slow_requests,
            "errors": self.errors,
            "error_rate": round((self.errors / count) * 100, 2) if count else 0.0,
            "requests_by_path": dict(self.by_path),
        }


# Global metrics instance
metrics = PerformanceMetrics()


def route_template(request: Request) -> str:
    """Path template of the matched route, so per-name URLs share one counter."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Flags slow requests and feeds the global metrics."""

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 10.0,
        very_slow_request_threshold: float = 30.0,
    ):
        super().__init__(app)
        metrics.slow_threshold = slow_request_threshold
        metrics.very_slow_threshold = very_slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            metrics.record_request(route_template(request), time.time() - start_time, is_error=True)
            raise

        duration = time.time() - start_time
        duration_ms = round(duration * 1000, 2)
        metrics.record_request(route_template(request), duration, is_error=response.status_code >= 500)
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        log_data = {
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        if duration >= metrics.very_slow_threshold:
            logger.error(f"VERY SLOW REQUEST: {method} {path} took {duration_ms}ms", extra=log_data)
        elif duration >= metrics.slow_threshold:
            logger.warning(f"Slow request: {method} {path} took {duration_ms}ms", extra=log_data)

        return response
