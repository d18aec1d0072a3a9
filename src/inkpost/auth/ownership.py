"""Ownership guard for post mutations.

Learn: Authentication (who is calling) happens in the request dependency;
this module is the authorization half (may they touch this post). The
check order is fixed: a missing post is reported as not_found before
ownership is considered, so "doesn't exist" and "not yours" stay
distinguishable.

The read-then-write window between this check and the UPDATE/DELETE is
not protected by a transaction; a post has exactly one owner, so the only
possible race is a user racing themselves.
"""

from typing import Optional

import structlog

from inkpost.auth.dependencies import CurrentIdentity
from inkpost.db.models import Post
from inkpost.errors import ForbiddenError, NotFoundError

logger = structlog.get_logger()


def ensure_owner(post: Post, identity: CurrentIdentity) -> None:
    """Raise ForbiddenError unless `identity` owns `post`."""
    if post.owner_id != identity.user_id:
        logger.warning(
            "posts.forbidden",
            post_id=post.id,
            owner_id=post.owner_id,
            caller_id=identity.user_id,
        )
        raise ForbiddenError("You can only modify your own posts")


def guard_post(post: Optional[Post], identity: CurrentIdentity) -> Post:
    """Return `post` if it exists and belongs to `identity`."""
    if post is None:
        raise NotFoundError("Post not found")
    ensure_owner(post, identity)
    return post
