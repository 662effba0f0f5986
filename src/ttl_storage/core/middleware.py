"""Request tracing for the storage API: request id, latency and 5xx counting."""

import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging import get_logger
from .metrics import metrics

_LOG = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
LATENCY_HEADER = "X-Response-Time-Ms"


def _route_template(request: Request) -> str:
    # "/api/storage/{key}" rather than the raw path, so keys stay out of the log
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
        finally:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            self._record(request, response, request_id, elapsed_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[LATENCY_HEADER] = str(elapsed_ms)
        return response

    @staticmethod
    def _record(
        request: Request, response: Optional[Response], request_id: str, elapsed_ms: int
    ) -> None:
        metrics.increment_requests()
        metrics.record_latency(elapsed_ms)
        failed = response is None or response.status_code >= 500
        if failed:
            metrics.increment_errors()
        status = "ERROR" if response is None else response.status_code
        log = _LOG.warning if failed else _LOG.info
        log(
            f"{request.method} {_route_template(request)} -> {status} "
            f"in {elapsed_ms}ms request_id={request_id}"
        )
