"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt generates and
embeds a random salt, and checkpw compares in constant time.
The work factor is configurable (INKPOST_BCRYPT_ROUNDS, default 12,
~100ms per hash); tests lower it to keep the suite fast.
"""

from functools import lru_cache

import bcrypt

from inkpost.config import settings


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    """Stand-in hash for logins whose email matches no user.

    Failed logins then cost the same whether or not the account exists.
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(b"inkpost-dummy-password", salt)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


def burn_password_check(password: str) -> None:
    """Run a throwaway bcrypt comparison for a login with no matching user."""
    bcrypt.checkpw(password.encode("utf-8")[:72], _dummy_hash())
