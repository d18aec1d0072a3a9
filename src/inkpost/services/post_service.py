"""Post service — CRUD for posts with ownership enforcement.

Learn: Reads are open to any authenticated caller; update and delete go
through guard_post, which checks existence first and ownership second.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.auth.dependencies import CurrentIdentity
from inkpost.auth.ownership import guard_post
from inkpost.db.models import Post, User, utcnow
from inkpost.errors import MissingFieldError, NotFoundError

logger = structlog.get_logger()


def _require_content(title: str, body: str) -> None:
    if not title or not body:
        raise MissingFieldError("Title and body are required")


class PostService:
    """Business logic for posts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, identity: CurrentIdentity, title: str, body: str) -> Post:
        """Create a post owned by the caller. The owner must still exist."""
        _require_content(title, body)
        owner = await self.db.get(User, identity.user_id)
        if owner is None:
            # Token outlived its user (deleted after issuance).
            raise NotFoundError("Author does not exist")

        post = Post(title=title, body=body, owner_id=owner.id, owner=owner)
        self.db.add(post)
        await self.db.flush()
        logger.info("posts.created", post_id=post.id, owner_id=owner.id)
        return post

    async def get(self, post_id: int) -> Optional[Post]:
        return await self.db.get(Post, post_id)

    async def list_posts(self) -> list[Post]:
        q = select(Post).order_by(Post.created_at.desc(), Post.id.desc())
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def list_posts_by_owner(self, owner_id: int) -> list[Post]:
        q = (
            select(Post)
            .where(Post.owner_id == owner_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def update(
        self, identity: CurrentIdentity, post_id: int, title: str, body: str
    ) -> Post:
        """Replace title and body. Only the owner may update."""
        _require_content(title, body)
        post = guard_post(await self.get(post_id), identity)
        post.title = title
        post.body = body
        post.updated_at = utcnow()
        await self.db.flush()
        logger.info("posts.updated", post_id=post.id)
        return post

    async def delete(self, identity: CurrentIdentity, post_id: int) -> None:
        """Delete a post. Only the owner may delete."""
        post = guard_post(await self.get(post_id), identity)
        await self.db.delete(post)
        await self.db.flush()
        logger.info("posts.deleted", post_id=post_id)
