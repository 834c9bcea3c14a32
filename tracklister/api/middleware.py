"""Request gating and access logging middleware.

Registration order in ``create_app`` makes the rate gate the outermost layer:
inbound request -> RateGateMiddleware -> AccessLogMiddleware -> routes.
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from tracklister.core.access_log import (
    RATE_LIMITED,
    caller_address,
    format_duration,
    log_access,
    request_target,
)
from tracklister.core.rate_gate import RateGate

logger = logging.getLogger(__name__)


def _log_request(request: Request, outcome: str) -> None:
    try:
        log_access(
            caller_address(request.headers, tuple(request.client) if request.client else None),
            request.method,
            request_target(request.url.path, request.url.query),
            f"HTTP/{request.scope.get('http_version', '1.1')}",
            outcome,
        )
    except Exception:
        logger.exception("Access log failed")


class RateGateMiddleware(BaseHTTPMiddleware):
    """Reject with 429 when the shared bucket is empty; the app is not called."""

    def __init__(self, app: ASGIApp, *, gate: RateGate) -> None:
        super().__init__(app)
        self._gate = gate

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self._gate.allow():
            _log_request(request, RATE_LIMITED)
            return PlainTextResponse(
                "Too Many Requests",
                status_code=429,
                headers={"Retry-After": "1"},
            )
        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One access line per admitted request, with the handler's elapsed time."""

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        try:
            return await call_next(request)
        finally:
            _log_request(request, format_duration(time.perf_counter() - start))
