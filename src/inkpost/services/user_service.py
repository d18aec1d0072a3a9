"""User service — durable user records.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Services flush but
leave commit to the caller, so one request is one unit of work.
"""

from typing import Optional

import structlog
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.db.models import Post, User
from inkpost.errors import DuplicateIdentityError, NotFoundError

logger = structlog.get_logger()


class UserService:
    """Business logic for user records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """Insert a user. Username and email must both be unused."""
        q = select(User.id).where(or_(User.username == username, User.email == email))
        result = await self.db.execute(q)
        if result.first() is not None:
            raise DuplicateIdentityError()

        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration.
            await self.db.rollback()
            raise DuplicateIdentityError()
        return user

    async def get(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def delete(self, user_id: int) -> None:
        """Delete a user together with every post they own.

        Posts are removed explicitly rather than relying on the FK cascade,
        which SQLite does not enforce by default.
        """
        await self.db.execute(delete(Post).where(Post.owner_id == user_id))
        result = await self.db.execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            raise NotFoundError("User not found")
        logger.info("users.deleted", user_id=user_id)
