"""
Request Correlation ID Middleware.
Tags every request with IDs that show up in logs, error bodies and response headers.
"""

import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from fastapi import FastAPI

from src.utils.structured_logging import (
    clear_request_context,
    get_logger,
    set_request_context,
)

logger = get_logger("correlation")

# Header names
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


def generate_id() -> str:
    """Generate a unique ID for tracing."""
    return str(uuid.uuid4())


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Request correlation for FastAPI.

    - Propagates an incoming X-Correlation-ID or starts a new one
    - Issues a fresh X-Request-ID per request (also on request.state)
    - Binds both into the structlog context for the request
    - Logs request completion with timing
    """

    def __init__(
        self,
        app: FastAPI,
        service_name: str = "artifact-service",
        log_requests: bool = True,
        exclude_paths: Optional[list[str]] = None,
    ):
        super().__init__(app)
        self.service_name = service_name
        self.log_requests = log_requests
        self.exclude_paths = exclude_paths or ["/health", "/favicon.ico"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or generate_id()
        request_id = generate_id()
        request.state.request_id = request_id

        clear_request_context()
        set_request_context(
            request_id,
            correlation_id=correlation_id,
            service=self.service_name,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if self.log_requests and request.url.path not in self.exclude_paths:
            log_level = "info" if response.status_code < 400 else "warning"
            getattr(logger, log_level)(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

        return response


def setup_correlation_middleware(app: FastAPI, service_name: str = "artifact-service") -> None:
    """
    Setup correlation middleware on a FastAPI app.

    Usage:
        app = FastAPI()
        setup_correlation_middleware(app)
    """
    app.add_middleware(
        CorrelationMiddleware,
        service_name=service_name,
    )
