"""JWT token issuance and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token is
three base64url segments: header (alg), payload (claims), signature. The
server signs with a shared HMAC secret and never stores tokens; a token is
valid from `nbf` until just before `exp`, and there is no revocation.

TokenCodec is built once from Settings and kept on app.state, so the
secret is never read from the environment per call.
"""

import binascii
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from jwt.utils import base64url_decode, base64url_encode

from inkpost.config import DEV_JWT_SECRET, HMAC_ALGORITHMS, Settings
from inkpost.errors import ExpiredTokenError, InvalidTokenError

REQUIRED_CLAIMS = ["sub", "iat", "nbf", "exp"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    """Decoded token payload. Timestamps are whole UTC seconds."""

    subject: int
    issued_at: int
    not_before: int
    expires_at: int


class TokenCodec:
    """Issues and verifies signed, time-bounded session tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret or DEV_JWT_SECRET,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(hours=settings.token_lifetime_hours),
        )

    def issue(self, user_id: int) -> str:
        """Create a token for `user_id`, valid from now for `lifetime`."""
        now = int(self._clock().timestamp())
        payload = {
            "sub": str(user_id),
            "iat": now,
            "nbf": now,
            "exp": now + int(self.lifetime.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str, now: Optional[datetime] = None) -> Claims:
        """Verify a token and return its claims.

        Raises InvalidTokenError for anything malformed, mis-signed, signed
        with another algorithm, or not yet valid, and ExpiredTokenError
        once `now >= exp`.
        """
        if not token or not _is_canonical(token):
            raise InvalidTokenError("Malformed token")

        try:
            # Time bounds are checked below against an explicit `now`.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        try:
            claims = Claims(
                subject=int(payload["sub"]),
                issued_at=int(payload["iat"]),
                not_before=int(payload["nbf"]),
                expires_at=int(payload["exp"]),
            )
        except (TypeError, ValueError):
            raise InvalidTokenError("Invalid token claims")

        current = int((now or self._clock()).timestamp())
        if current < claims.not_before:
            raise InvalidTokenError("Token is not yet valid")
        if current >= claims.expires_at:
            raise ExpiredTokenError()
        return claims


def _is_canonical(token: str) -> bool:
    """Reject tokens whose segments decode but are not canonically encoded.

    base64 ignores the spare low bits of the final character, so without
    this check some single-character edits would still verify.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    for segment in segments:
        raw = segment.encode("ascii", errors="ignore")
        if len(raw) != len(segment):
            return False
        try:
            if base64url_encode(base64url_decode(raw)) != raw:
                return False
        except (binascii.Error, ValueError):
            return False
    return True
