"""Session issuer — turns credentials into a signed session token.

Learn: This is the boundary between authenticate (prove who you are with
a password) and authorize (carry a token that says who you are). Both
register and login end in TokenCodec.issue for the user's id.

Login failures are indistinguishable on purpose: an unknown email and a
wrong password raise the same InvalidCredentialsError, and an unknown
email still pays for one bcrypt comparison.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.auth.jwt import TokenCodec
from inkpost.auth.password import burn_password_check, hash_password, verify_password
from inkpost.db.models import User
from inkpost.errors import InvalidCredentialsError, MissingFieldError
from inkpost.services.user_service import UserService

logger = structlog.get_logger()


class SessionIssuer:
    """Registration and login."""

    def __init__(self, db: AsyncSession, codec: TokenCodec):
        self.db = db
        self.codec = codec
        self.users = UserService(db)

    async def register(self, username: str, email: str, password: str) -> tuple[User, str]:
        """Create an account and return it with a fresh token."""
        if not username or not email or not password:
            raise MissingFieldError("Username, email, and password are required")

        user = await self.users.create(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        token = self.codec.issue(user.id)
        logger.info("auth.registered", user_id=user.id)
        return user, token

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check email/password and return the user with a fresh token."""
        if not email or not password:
            raise MissingFieldError("Email and password are required")

        user = await self.users.get_by_email(email)
        if user is None:
            burn_password_check(password)
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentialsError()

        token = self.codec.issue(user.id)
        logger.info("auth.logged_in", user_id=user.id)
        return user, token
