"""
API error types and the handlers that render them.

Every error response has the shape
    {"error": {"code": ..., "message": ..., "details": {...}}}
and carries an X-Correlation-ID header. Tracebacks stay in the server log.

Status codes:
- 400 VALIDATION_ERROR: malformed snapshot or request
- 401 AUTHENTICATION_ERROR: no user identity
- 402 PAYMENT_REQUIRED: plan limit reached
- 403 PERMISSION_DENIED: agency-only feature
- 404 NOT_FOUND
- 500 INTERNAL_ERROR
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class AppError(Exception):
    """
    Base for errors that map to an HTTP response.

    Subclasses set `default_code`, `default_status` and `default_message`.
    """

    default_code = "INTERNAL_ERROR"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(AppError):
    default_code = "VALIDATION_ERROR"
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class AuthenticationError(AppError):
    default_code = "AUTHENTICATION_ERROR"
    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class PaymentRequiredError(AppError):
    """A free-plan limit was reached."""

    default_code = "PAYMENT_REQUIRED"
    default_status = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "This feature requires a premium plan"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class PermissionDeniedError(AppError):
    default_code = "PERMISSION_DENIED"
    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class NotFoundError(AppError):
    default_code = "NOT_FOUND"
    default_status = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: Optional[str] = None):
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message=message)


# =============================================================================
# Correlation ids
# =============================================================================

def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id(request: Request) -> str:
    """Incoming header first, then the id stored by the middleware, else a new one."""
    incoming = request.headers.get(CORRELATION_HEADER)
    if incoming:
        return incoming
    stored = getattr(request.state, "correlation_id", None)
    return stored or generate_correlation_id()


# =============================================================================
# Rendering
# =============================================================================

def _log_app_error(request: Request, error: AppError, correlation_id: str) -> None:
    logger.warning(
        "api.app_error",
        extra={
            "correlation_id": correlation_id,
            "error_code": error.code,
            "status_code": error.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )


def _error_response(error: AppError, correlation_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(),
        headers={CORRELATION_HEADER: correlation_id},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError raised from a route or a dependency."""
    correlation_id = get_correlation_id(request)
    _log_app_error(request, exc, correlation_id)
    return _error_response(exc, correlation_id)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI request validation failures as 400 VALIDATION_ERROR."""
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return await app_error_handler(request, ValidationError(details={"fields": fields}))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(ErrorHandlerMiddleware)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Stamps every response with a correlation id and turns exceptions that
    escaped the handlers into error responses.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = get_correlation_id(request)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except AppError as e:
            _log_app_error(request, e, correlation_id)
            return _error_response(e, correlation_id)
        except Exception as e:
            logger.exception(
                "api.unhandled_exception",
                extra={
                    "correlation_id": correlation_id,
                    "error_type": type(e).__name__,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            internal = AppError(details={"correlation_id": correlation_id})
            return _error_response(internal, correlation_id)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
