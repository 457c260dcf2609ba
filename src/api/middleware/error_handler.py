"""Global error handling middleware for consistent error responses."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from src.schemas.common import ErrorDetail, ErrorListResponse, ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

SERVER_ERROR_BODY = "Server error"


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
            details: Optional additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type="not_found",
            details=details,
        )


class MalformedKeyError(APIError):
    """A lookup key that can never identify a stored document."""

    def __init__(self, message: str = "Malformed identifier") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type="malformed_key",
        )


class ValidationError(APIError):
    """Request validation error."""

    def __init__(self, message: str = "Validation error", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type="validation_error",
            details=details,
        )


class DuplicateIdentityError(APIError):
    """An identity with the same unique key already exists."""

    def __init__(self, message: str = "User already exists!") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type="duplicate_identity",
        )


class AuthenticationError(APIError):
    """Authentication failure error."""

    def __init__(self, message: str = "Authentication required", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_type="authentication_error",
            details=details,
        )


class UpstreamNotFoundError(APIError):
    """An upstream service answered with a non-success status."""

    def __init__(self, message: str = "Upstream resource not found") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type="upstream_not_found",
        )


class UpstreamUnavailableError(APIError):
    """An upstream service could not be reached or sent an unreadable body."""

    def __init__(self, message: str = "Upstream service unavailable") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_type="upstream_unavailable",
        )


class StoreError(APIError):
    """Unexpected persistence failure. Details are logged, never returned."""

    def __init__(self, message: str = "Store operation failed") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type="store_error",
        )


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> Response:
    """Create the client-facing response for an error.

    Shapes by status class:
    - 401: ``{"errors": {"msg": ...}}``
    - 400: ``{"errors": [{"msg": ..., "param": ...}, ...]}``
    - 5xx except 502: plain text body, internals are never exposed
    - anything else: ``{"msg": ...}``

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        details: Optional error details.
        request_id: Optional request ID echoed back as a header.

    Returns:
        Response: Formatted error response.
    """
    headers = {"X-Error-Type": error_type}
    if request_id:
        headers["X-Request-ID"] = request_id

    if status_code == status.HTTP_401_UNAUTHORIZED:
        body = ErrorResponse(errors=ErrorDetail(msg=message))
    elif status_code == status.HTTP_400_BAD_REQUEST:
        items = details or [{"msg": message}]
        body = ErrorListResponse(
            errors=[ErrorDetail(msg=d.get("msg", message), param=d.get("param")) for d in items]
        )
    elif status_code >= 500 and status_code != status.HTTP_502_BAD_GATEWAY:
        return PlainTextResponse(SERVER_ERROR_BODY, status_code=status_code, headers=headers)
    else:
        body = MessageResponse(msg=message)

    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _param_from_loc(loc: tuple[Any, ...] | list[Any]) -> str | None:
    # ("body", "skills") -> "skills"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or None


async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """Render FastAPI request validation failures as a 400 error list."""
    details = [
        {"msg": error.get("msg", "Invalid value"), "param": _param_from_loc(error.get("loc", ()))}
        for error in exc.errors()
    ]
    logger.warning(
        "Request validation failed: %s %s - %d error(s)",
        request.method,
        request.url.path,
        len(details),
    )
    return create_error_response(
        error_type="validation_error",
        message="Validation error",
        status_code=status.HTTP_400_BAD_REQUEST,
        details=details,
        request_id=request.headers.get("X-Request-ID"),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Ensures every request gets exactly one response in a consistent format.
    Logs full stack traces for debugging while returning safe messages to clients.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except StoreError as e:
        logger.error(
            "Store error: %s\n%s",
            e.message,
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            request_id=request_id,
        )

    except APIError as e:
        logger.warning(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            details=e.details,
            request_id=request_id,
        )

    except HTTPException as e:
        logger.warning(
            "HTTP exception: %s - %s",
            e.status_code,
            e.detail,
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
