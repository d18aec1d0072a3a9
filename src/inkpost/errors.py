"""Domain errors and their HTTP rendering.

Learn: Services raise InkpostError subclasses; they never build HTTP
responses. One exception handler turns every error into a JSON body using
ERROR_RESPONSES, an explicit table from error code to
(status, public code, public message).

Several internal causes deliberately collapse onto one public kind. Every
token failure (bad signature, garbage, expired, not yet valid) is reported
as "unauthenticated" with one fixed message so callers cannot tell which
check failed.
"""

from typing import Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = structlog.get_logger()


class InkpostError(Exception):
    """Base class for all errors surfaced to API callers."""

    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ─── Input ───────────────────────────────────────────────


class MissingFieldError(InkpostError):
    code = "missing_field"
    default_message = "Required field is missing"


class InvalidIdentifierError(InkpostError):
    code = "invalid_identifier"
    default_message = "Invalid identifier"


class DuplicateIdentityError(InkpostError):
    code = "duplicate_identity"
    default_message = "Username or email already exists"


# ─── Authentication ──────────────────────────────────────


class InvalidCredentialsError(InkpostError):
    """Login failed. Same message for unknown email and wrong password."""

    code = "invalid_credentials"
    default_message = "Invalid email or password"


class MissingCredentialError(InkpostError):
    code = "missing_credential"
    default_message = "Authorization header is required"


class MalformedCredentialError(InkpostError):
    code = "malformed_credential"
    default_message = "Invalid authorization format"


class UnauthenticatedError(InkpostError):
    code = "unauthenticated"
    default_message = "Invalid or expired token"


class TokenError(InkpostError):
    """Raised by the token codec when a token cannot be trusted."""

    code = "invalid_token"
    default_message = "Invalid token"


class InvalidTokenError(TokenError):
    code = "invalid_token"
    default_message = "Invalid token"


class ExpiredTokenError(TokenError):
    code = "expired_token"
    default_message = "Token has expired"


# ─── Resources ───────────────────────────────────────────


class NotFoundError(InkpostError):
    code = "not_found"
    default_message = "Resource not found"


class ForbiddenError(InkpostError):
    code = "forbidden"
    default_message = "You do not have permission to modify this resource"


class StoreUnavailableError(InkpostError):
    code = "store_unavailable"
    default_message = "Service temporarily unavailable"


# code → (HTTP status, public code, public message or None for the
# exception's own message)
ERROR_RESPONSES: dict[str, tuple[int, str, Optional[str]]] = {
    MissingFieldError.code: (400, "missing_field", None),
    InvalidIdentifierError.code: (400, "invalid_identifier", None),
    DuplicateIdentityError.code: (400, "duplicate_identity", None),
    InvalidCredentialsError.code: (401, "invalid_credentials", InvalidCredentialsError.default_message),
    MissingCredentialError.code: (401, "missing_credential", MissingCredentialError.default_message),
    MalformedCredentialError.code: (401, "malformed_credential", MalformedCredentialError.default_message),
    UnauthenticatedError.code: (401, "unauthenticated", UnauthenticatedError.default_message),
    InvalidTokenError.code: (401, "unauthenticated", UnauthenticatedError.default_message),
    ExpiredTokenError.code: (401, "unauthenticated", UnauthenticatedError.default_message),
    NotFoundError.code: (404, "not_found", None),
    ForbiddenError.code: (403, "forbidden", None),
    StoreUnavailableError.code: (503, "store_unavailable", StoreUnavailableError.default_message),
}

_FALLBACK = (500, "internal_error", InkpostError.default_message)


def render_error(exc: InkpostError) -> JSONResponse:
    """Build the JSON response for a domain error."""
    status, code, message = ERROR_RESPONSES.get(exc.code, _FALLBACK)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content={"detail": message or exc.message, "code": code},
        headers=headers,
    )


async def inkpost_error_handler(request: Request, exc: InkpostError) -> JSONResponse:
    return render_error(exc)


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Database unreachable or pool exhausted — fail this request only."""
    logger.error(
        "store.unavailable",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return render_error(StoreUnavailableError())


STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)
