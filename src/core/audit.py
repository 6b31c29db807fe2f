"""
Audit Middleware - Request/response logging for monitoring and compliance.

This middleware logs all API requests including:
- Request method and path
- Response status code (206 marks a partial aggregation)
- Request duration
- The SWIFT code or country the request targets

Logs are written to the application log file.
"""
import re
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging_config import get_logger

logger = get_logger(__name__)

HEALTH_PATHS = ("/health", "/health/ready")

# /swift-codes/{code} and /swift-codes/country/{iso2}, under any prefix
_TARGET_PATTERN = re.compile(r"/swift-codes/(?:(country)/)?([^/]+)/?$")


def describe_target(path: str) -> str:
    """Name the entity a request path targets, or "-" when there is none."""
    match = _TARGET_PATTERN.search(path)
    if match is None:
        return "-"
    kind = "country" if match.group(1) else "swift_code"
    return f"{kind}={match.group(2)[:16]}"


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging all requests and responses.

    Captures timing information and key request metadata
    for debugging and compliance purposes.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log audit information."""
        start_time = time.time()

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        target = describe_target(path)

        try:
            response = await call_next(request)

            duration = time.time() - start_time

            self._log_request(
                method=method,
                path=path,
                status_code=response.status_code,
                duration=duration,
                client_ip=client_ip,
                target=target
            )

            response.headers["X-Response-Time"] = f"{duration:.3f}s"

            return response

        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"REQUEST FAILED: {method} {path} "
                f"client={client_ip} duration={duration:.3f}s error={str(e)}"
            )
            raise

    def _log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration: float,
        client_ip: str,
        target: str
    ) -> None:
        """Log request details."""
        if path in HEALTH_PATHS:
            logger.debug(
                f"HEALTH: {path} status={status_code} duration={duration:.3f}s"
            )
            return

        # Partial content is degraded, not failed
        if status_code >= 500:
            log_fn = logger.error
        elif status_code >= 400 or status_code == 206:
            log_fn = logger.warning
        else:
            log_fn = logger.info

        log_fn(
            f"REQUEST: {method} {path} "
            f"status={status_code} duration={duration:.3f}s "
            f"client={client_ip} {target}"
        )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff
    - X-Frame-Options: DENY
    - Referrer-Policy: no-referrer
    - Cache-Control: no-store
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        # Directory entries change through POST/DELETE; never serve stale copies
        response.headers["Cache-Control"] = "no-store"

        return response
