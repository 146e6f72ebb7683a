"""HTTP request metrics.

Records one duration and one status code per request through the
RequestRecorder protocol. HttpMetrics is the in-process recorder: a request
counter, a millisecond duration histogram and an in-flight gauge, all keyed
by normalized (method, route template, status) labels so ticker values never
become label values.
"""

from __future__ import annotations

import threading
import time
from bisect import bisect_left
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from fastapi import Request, Response

from pricing.logging import get_logger, request_context

logger = get_logger(__name__)

HTTP_REQUESTS_TOTAL = "http_requests_total"
HTTP_REQUEST_DURATION = "http_request_duration"
HTTP_REQUESTS_IN_FLIGHT = "http_requests_in_flight"

# Upper bounds in milliseconds; anything slower lands in the +Inf bucket.
DURATION_BUCKETS_MS: tuple[float, ...] = (
    5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000,
)

UNMATCHED_PATH = "/unmatched"

LabelKey = tuple[str, str, str]


class RequestRecorder(Protocol):
    """Anything that can record a finished request."""

    def record(self, method: str, path: str, status: int, duration_ms: float) -> None: ...


def normalize_method(method: str | None) -> str:
    if method is None or not method.strip():
        return "UNKNOWN"
    return method.strip().upper()


def normalize_path(request: Request) -> str:
    """Route template the request matched, e.g. /api/v1/price/{ticker}.

    Built from the full request path with each path parameter value put back
    as its {name}, so router prefixes are kept. Requests no route matched
    share the /unmatched label.
    """
    scope = request.scope
    if scope.get("route") is None and scope.get("endpoint") is None:
        return UNMATCHED_PATH

    path = request.url.path
    params = scope.get("path_params") or {}
    if not params:
        return path

    segments = path.split("/")
    for name, value in params.items():
        value = str(value)
        placeholder = "{" + name + "}"
        if "/" in value:
            # {name:path} parameters span several segments
            head, sep, tail = "/".join(segments).rpartition(value)
            if sep:
                segments = (head + placeholder + tail).split("/")
            continue
        # Path parameters follow the static prefix, so match from the end
        for index in range(len(segments) - 1, -1, -1):
            if segments[index] == value:
                segments[index] = placeholder
                break
    return "/".join(segments)


class HttpMetrics:
    """Thread-safe in-process metric registry."""

    def __init__(self, buckets: tuple[float, ...] = DURATION_BUCKETS_MS) -> None:
        self._buckets = buckets
        self._lock = threading.Lock()
        self._requests: dict[LabelKey, int] = defaultdict(int)
        self._bucket_counts: dict[LabelKey, list[int]] = {}
        self._duration_sum: dict[LabelKey, float] = defaultdict(float)
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def record(self, method: str, path: str, status: int, duration_ms: float) -> None:
        key = (normalize_method(method), path, str(status))
        index = bisect_left(self._buckets, duration_ms)
        with self._lock:
            self._requests[key] += 1
            counts = self._bucket_counts.setdefault(key, [0] * (len(self._buckets) + 1))
            counts[index] += 1
            self._duration_sum[key] += duration_ms

    def request_count(self, method: str, path: str, status: int) -> int:
        with self._lock:
            return self._requests.get((method, path, str(status)), 0)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of every metric."""
        bounds = [str(b) for b in self._buckets] + ["+Inf"]
        with self._lock:
            requests = [
                {"method": m, "path": p, "status": s, "count": count}
                for (m, p, s), count in self._requests.items()
            ]
            durations = []
            for (m, p, s), counts in self._bucket_counts.items():
                # Cumulative counts per upper bound, Prometheus style
                cumulative: list[int] = []
                running = 0
                for count in counts:
                    running += count
                    cumulative.append(running)
                durations.append({
                    "method": m,
                    "path": p,
                    "status": s,
                    "count": running,
                    "sum_ms": round(self._duration_sum[(m, p, s)], 3),
                    "buckets": dict(zip(bounds, cumulative)),
                })
            in_flight = self._in_flight
        return {
            HTTP_REQUESTS_TOTAL: requests,
            HTTP_REQUEST_DURATION: durations,
            HTTP_REQUESTS_IN_FLIGHT: in_flight,
        }

    def _enter(self) -> None:
        with self._lock:
            self._in_flight += 1

    def _exit(self) -> None:
        with self._lock:
            self._in_flight -= 1

    async def __call__(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """HTTP middleware: time the request and record it, even on error."""
        start = time.perf_counter()
        status = 500
        self._enter()
        try:
            with request_context(request.method, request.url.path):
                response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._exit()
            duration_ms = (time.perf_counter() - start) * 1000.0
            try:
                self.record(request.method, normalize_path(request), status, duration_ms)
            except Exception:
                logger.exception(
                    "http_metrics_record_failed",
                    method=request.method,
                    path=request.url.path,
                )
