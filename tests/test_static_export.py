"""Static export tests — JSON files written for the prebuilt frontend."""

import json

import pytest

from inkpost.auth.dependencies import CurrentIdentity
from inkpost.services.post_service import PostService
from inkpost.services.static_export import export_posts
from inkpost.services.user_service import UserService


@pytest.mark.asyncio
async def test_export_writes_index_and_one_file_per_post(db_session, tmp_path):
    user = await UserService(db_session).create("alice", "alice@x.com", "$2b$fake")
    posts = PostService(db_session)
    first = await posts.create(CurrentIdentity(user.id), "Hello", "<p>first</p>")
    second = await posts.create(CurrentIdentity(user.id), "Again", "second")
    await db_session.commit()

    count = await export_posts(db_session, tmp_path / "site")
    assert count == 2

    data_dir = tmp_path / "site" / "data"
    index = json.loads((data_dir / "posts.json").read_text())
    assert [p["id"] for p in index["posts"]] == [second.id, first.id]
    assert set(index["postsMap"]) == {str(first.id), str(second.id)}

    one = json.loads((data_dir / f"post-{first.id}.json").read_text())
    assert one["title"] == "Hello"
    assert one["body"] == "<p>first</p>"
    assert one["author"] == "alice"
    assert "owner_id" not in one


@pytest.mark.asyncio
async def test_export_with_no_posts(db_session, tmp_path):
    assert await export_posts(db_session, tmp_path) == 0
    index = json.loads((tmp_path / "data" / "posts.json").read_text())
    assert index == {"posts": [], "postsMap": {}}
