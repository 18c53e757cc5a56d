"""
Structured error responses for the artifact API.

Every failure leaves the service as the same JSON envelope: an error code,
a human message, the request id and where the request was going.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from enum import Enum
import traceback
import uuid

from src.utils.structured_logging import get_logger

logger = get_logger("errors")


class ErrorCode(str, Enum):
    """Codes the artifact API can answer with."""
    INTERNAL_ERROR = "E1001"

    # Request shape
    VALIDATION_ERROR = "E2000"
    # Well-formed, but rejected by the artifact rules
    INVALID_INPUT = "E2006"

    UNAUTHORIZED = "E3000"

    NOT_FOUND = "E4000"
    METHOD_NOT_ALLOWED = "E4005"


ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
}

# Routing errors raised by Starlette itself, before any artifact code runs
HTTP_STATUS_ERROR_CODES: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
}


@dataclass
class FieldError:
    """One offending request field, as reported by pydantic."""
    field: str
    message: str
    code: str


@dataclass
class ErrorDetail:
    """Code, message and optional context of a single failure."""
    code: ErrorCode
    message: str
    field_errors: List[FieldError] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorResponse:
    """Structured error response."""
    error: ErrorDetail
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: Optional[str] = None
    method: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        response = {
            "error": {
                "code": self.error.code.value,
                "message": self.error.message,
            },
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
        }

        if self.error.field_errors:
            response["error"]["field_errors"] = [
                {
                    "field": fe.field,
                    "message": fe.message,
                    "code": fe.code,
                }
                for fe in self.error.field_errors
            ]

        if self.error.details:
            response["error"]["details"] = self.error.details

        if self.path:
            response["path"] = self.path

        if self.method:
            response["method"] = self.method

        return response

    @property
    def status_code(self) -> int:
        """Get HTTP status code for this error."""
        return ERROR_STATUS_CODES.get(self.error.code, 500)


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field_errors: List[FieldError] = None,
        details: Dict[str, Any] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field_errors = field_errors or []
        self.details = details or {}

    def to_response(
        self,
        request_id: Optional[str] = None,
        path: Optional[str] = None,
        method: Optional[str] = None,
    ) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                field_errors=self.field_errors,
                details=self.details,
            ),
            request_id=request_id or str(uuid.uuid4()),
            path=path,
            method=method,
        )

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.code, 500)


# Specific exception classes
class ValidationException(APIException):
    """Request validation error exception."""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: List[FieldError] = None,
        details: Dict[str, Any] = None,
    ):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            field_errors=field_errors,
            details=details,
        )


class InvalidInputException(APIException):
    """Well-formed input that the domain rejects (e.g. mismatched references)."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            code=ErrorCode.INVALID_INPUT,
            message=message,
            details=details,
        )


class NotFoundException(APIException):
    """Resource not found exception."""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Any = None,
    ):
        message = f"{resource_type} not found"
        if resource_id:
            message = f"{resource_type} with id '{resource_id}' not found"

        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class UnauthorizedException(APIException):
    """Unauthorized exception."""

    def __init__(
        self,
        message: str = "Authentication required",
    ):
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message=message,
        )


class ErrorHandler:
    """
    Turns any exception into an ErrorResponse.

    APIExceptions keep their code and message. Anything else is logged with
    its traceback and answered as INTERNAL_ERROR, without leaking the cause
    unless include_stack_trace is set.
    """

    def __init__(
        self,
        include_stack_trace: bool = False,
        log_errors: bool = True,
    ):
        self.include_stack_trace = include_stack_trace
        self.log_errors = log_errors

    def handle(
        self,
        exception: Exception,
        request_id: Optional[str] = None,
        path: Optional[str] = None,
        method: Optional[str] = None,
    ) -> ErrorResponse:
        """Handle an exception and return structured response."""
        request_id = request_id or str(uuid.uuid4())

        if isinstance(exception, APIException):
            if self.log_errors:
                logger.warning(
                    "API error",
                    code=exception.code.value,
                    error_message=exception.message,
                    request_id=request_id,
                    path=path,
                )
            return exception.to_response(request_id, path, method)

        if self.log_errors:
            logger.error(
                "Unhandled exception",
                error_type=type(exception).__name__,
                error=str(exception),
                request_id=request_id,
                path=path,
                traceback=traceback.format_exc(),
            )

        details = {}
        if self.include_stack_trace:
            details["exception_type"] = type(exception).__name__
            details["stack_trace"] = traceback.format_exc()

        return ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.INTERNAL_ERROR,
                message="An internal error occurred",
                details=details,
            ),
            request_id=request_id,
            path=path,
            method=method,
        )


# FastAPI integration
def create_exception_handlers(handler: "ErrorHandler" = None):
    """Create FastAPI exception handlers keyed by exception type."""
    from fastapi import Request
    from fastapi.responses import JSONResponse
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException as StarletteHTTPException

    handler = handler or error_handler

    def _respond(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        response = handler.handle(
            exc,
            request_id=request_id,
            path=str(request.url.path),
            method=request.method,
        )
        return JSONResponse(
            status_code=response.status_code,
            content=response.to_dict(),
        )

    async def api_exception_handler(request: Request, exc: APIException):
        """Handle APIException."""
        return _respond(request, exc)

    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Handle Pydantic validation errors."""
        field_errors = []
        for error in exc.errors():
            field_name = ".".join(str(loc) for loc in error["loc"])
            field_errors.append(FieldError(
                field=field_name,
                message=error["msg"],
                code=error["type"],
            ))

        api_exc = ValidationException(
            message="Request validation failed",
            field_errors=field_errors,
        )
        return _respond(request, api_exc)

    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ):
        """Handle Starlette HTTP exceptions."""
        error_code = HTTP_STATUS_ERROR_CODES.get(
            exc.status_code, ErrorCode.INTERNAL_ERROR
        )
        api_exc = APIException(
            code=error_code,
            message=str(exc.detail),
        )
        return _respond(request, api_exc)

    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        return _respond(request, exc)

    return {
        APIException: api_exception_handler,
        RequestValidationError: validation_exception_handler,
        StarletteHTTPException: http_exception_handler,
        Exception: generic_exception_handler,
    }


# Global error handler
error_handler = ErrorHandler(include_stack_trace=False)
