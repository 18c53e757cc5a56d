"""
API Middleware Package.

Provides middleware components for:
- Request correlation and request logging
"""

from src.api.middleware.correlation import (
    CorrelationMiddleware,
    setup_correlation_middleware,
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
)

__all__ = [
    "CorrelationMiddleware",
    "setup_correlation_middleware",
    "CORRELATION_ID_HEADER",
    "REQUEST_ID_HEADER",
]
