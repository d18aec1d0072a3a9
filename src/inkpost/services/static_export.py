"""Static-site export — dump every post as JSON for a prebuilt frontend.

Learn: Writes into <output>/data/:
- posts.json      → {"posts": [...newest first...], "postsMap": {id: post}}
- post-<id>.json  → one file per post

Each exported post carries id, title, body, author (username) and
created_at. Bodies are written as-is; escaping is the renderer's job.
"""

import json
from pathlib import Path

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.db.models import Post
from inkpost.services.post_service import PostService

logger = structlog.get_logger()


def _static_post(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "body": post.body,
        "author": post.author,
        "created_at": post.created_at.isoformat(),
    }


async def export_posts(db: AsyncSession, output_dir: Path) -> int:
    """Write the JSON export under `output_dir`; return the post count."""
    posts = [_static_post(p) for p in await PostService(db).list_posts()]

    data_dir = Path(output_dir) / "data"
    data_dir.mkdir(parents=True, exist_ok=True)

    page = {
        "posts": posts,
        "postsMap": {str(p["id"]): p for p in posts},
    }
    (data_dir / "posts.json").write_text(json.dumps(page, indent=2))

    for post in posts:
        (data_dir / f"post-{post['id']}.json").write_text(json.dumps(post, indent=2))

    logger.info("static_export.done", output=str(output_dir), posts=len(posts))
    return len(posts)
