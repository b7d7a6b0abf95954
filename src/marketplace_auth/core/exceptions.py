"""Domain error taxonomy and exception handlers with request_id in responses."""

from enum import Enum

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.marketplace_auth.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors the API maps to a status code and machine-readable code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Input rejected by a domain rule (role, password strength, missing token)."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class WeakPasswordError(ValidationError):
    """Password rejected by the strength policy."""

    code = "WEAK_PASSWORD"

    def __init__(self, message: str, rule: str):
        super().__init__(message)
        self.rule = rule


class ConflictError(AppError):
    """Email or username already in use."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class AuthenticationError(AppError):
    """Bad credentials, unverified email or inactive account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"


class AuthorizationError(AppError):
    """Authenticated account lacks the role required for the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class TokenErrorReason(str, Enum):
    INVALID = "invalid"
    EXPIRED = "expired"
    WRONG_TYPE = "wrong_type"
    NOT_FOUND = "not_found"


class TokenError(AppError):
    """Invalid, expired or wrong-type JWT, or unusable single-use token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"

    def __init__(
        self,
        message: str,
        reason: TokenErrorReason,
        code: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, code=code, status_code=status_code)
        self.reason = reason


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class InternalError(AppError):
    """Store or transport failure. The message is safe to show to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                code=exc.code,
                path=request.url.path,
                error=str(exc.__cause__) if exc.__cause__ else exc.message,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "code": exc.code,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
