"""FastAPI auth dependencies — the request identity interceptor.

Learn: get_current_user is attached to every protected router in
api/__init__.py and declared again by handlers that need the caller's id.
FastAPI caches a dependency per request, so the token is decoded once.

Failure order:
1. No Authorization header          → missing_credential (401)
2. Header without "Bearer " prefix  → malformed_credential (401)
3. Token fails to decode for any reason → unauthenticated (401)

Step 3 deliberately drops the reason (bad signature vs expired vs
garbage); it is logged server-side only.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from inkpost.auth.jwt import TokenCodec
from inkpost.errors import (
    MalformedCredentialError,
    MissingCredentialError,
    TokenError,
    UnauthenticatedError,
)

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, scoped to one request."""

    user_id: int


def get_token_codec(request: Request) -> TokenCodec:
    """The codec built by create_app from the app's Settings."""
    return request.app.state.token_codec


async def get_current_user(
    authorization: Optional[str] = Header(None),
    codec: TokenCodec = Depends(get_token_codec),
) -> CurrentIdentity:
    """Resolve the bearer token into a CurrentIdentity or reject the request."""
    if not authorization:
        raise MissingCredentialError()

    if not authorization.startswith(BEARER_PREFIX):
        raise MalformedCredentialError()

    token = authorization[len(BEARER_PREFIX):]
    try:
        claims = codec.decode(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=e.code, detail=e.message)
        raise UnauthenticatedError()

    identity = CurrentIdentity(user_id=claims.subject)
    structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity
