"""Post API tests — CRUD plus ownership enforcement.

Learn: The alice/bob walkthrough is the heart of it: bob can read alice's
post but not change it, alice can, and a bad token is rejected before
ownership is even looked at.
"""

import pytest

from inkpost.auth.jwt import TokenCodec


@pytest.fixture
async def alice(register):
    return await register("alice", "alice@x.com", "pw1")


@pytest.fixture
async def bob(register):
    return await register("bob", "bob@x.com", "pw2")


@pytest.fixture
async def alice_post(client, alice, bearer):
    _, token = alice
    r = await client.post("/api/posts", json={"title": "t", "body": "b"}, headers=bearer(token))
    assert r.status_code == 201
    return r.json()


# ═══════════════════════════════════════════════════════════
# Ownership walkthrough
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_owner_only_update_scenario(client, alice, bob, alice_post, bearer):
    alice_user, t1 = alice
    _, t2 = bob
    assert alice_post["owner_id"] == alice_user["id"]
    assert alice_post["author"] == "alice"

    r = await client.put(
        f"/api/posts/{alice_post['id']}",
        json={"title": "t", "body": "hijacked"},
        headers=bearer(t2),
    )
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"

    r = await client.put(
        f"/api/posts/{alice_post['id']}",
        json={"title": "t", "body": "new body"},
        headers=bearer(t1),
    )
    assert r.status_code == 200
    assert r.json()["body"] == "new body"
    assert r.json()["owner_id"] == alice_user["id"]

    forged = TokenCodec("forged-secret-0123456789abcdefghij").issue(alice_user["id"])
    r = await client.delete(f"/api/posts/{alice_post['id']}", headers=bearer(forged))
    assert r.status_code == 401

    r = await client.get(f"/api/posts/{alice_post['id']}", headers=bearer(t1))
    assert r.json()["body"] == "new body"


@pytest.mark.asyncio
async def test_non_owner_cannot_delete(client, bob, alice_post, bearer):
    _, t2 = bob
    r = await client.delete(f"/api/posts/{alice_post['id']}", headers=bearer(t2))
    assert r.status_code == 403

    r = await client.get(f"/api/posts/{alice_post['id']}", headers=bearer(t2))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_owner_deletes(client, alice, alice_post, bearer):
    _, t1 = alice
    r = await client.delete(f"/api/posts/{alice_post['id']}", headers=bearer(t1))
    assert r.status_code == 204

    r = await client.get(f"/api/posts/{alice_post['id']}", headers=bearer(t1))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_unauthenticated_mutation_rejected_before_lookup(client, alice_post):
    r = await client.put(f"/api/posts/{alice_post['id']}", json={"title": "x", "body": "y"})
    assert r.status_code == 401
    r = await client.delete("/api/posts/999999")
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Not found / bad ids / validation
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_post_is_404_not_403(client, bob, bearer):
    _, t2 = bob
    r = await client.put("/api/posts/999999", json={"title": "x", "body": "y"}, headers=bearer(t2))
    assert r.status_code == 404
    r = await client.delete("/api/posts/999999", headers=bearer(t2))
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["abc", "-1", "0", "1.5"])
async def test_invalid_post_id_is_400(client, alice, bearer, bad_id):
    _, t1 = alice
    for method in ("get", "delete"):
        r = await getattr(client, method)(f"/api/posts/{bad_id}", headers=bearer(t1))
        assert r.status_code == 400
        assert r.json()["code"] == "invalid_identifier"
    r = await client.put(f"/api/posts/{bad_id}", json={"title": "x", "body": "y"}, headers=bearer(t1))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_create_requires_title_and_body(client, alice, bearer):
    _, t1 = alice
    r = await client.post("/api/posts", json={"title": "only title"}, headers=bearer(t1))
    assert r.status_code == 400
    assert r.json()["code"] == "missing_field"


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_owner(client, alice, bob, bearer):
    alice_user, t1 = alice
    bob_user, _ = bob
    r = await client.post(
        "/api/posts",
        json={"title": "t", "body": "b", "owner_id": bob_user["id"]},
        headers=bearer(t1),
    )
    assert r.status_code == 201
    assert r.json()["owner_id"] == alice_user["id"]


# ═══════════════════════════════════════════════════════════
# Listing
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_posts_newest_first(client, alice, bob, bearer):
    _, t1 = alice
    _, t2 = bob
    await client.post("/api/posts", json={"title": "first", "body": "1"}, headers=bearer(t1))
    await client.post("/api/posts", json={"title": "second", "body": "2"}, headers=bearer(t2))

    r = await client.get("/api/posts", headers=bearer(t1))
    assert r.status_code == 200
    assert [p["title"] for p in r.json()] == ["second", "first"]


@pytest.mark.asyncio
async def test_list_posts_by_user(client, alice, bob, bearer):
    alice_user, t1 = alice
    _, t2 = bob
    await client.post("/api/posts", json={"title": "a1", "body": "1"}, headers=bearer(t1))
    await client.post("/api/posts", json={"title": "b1", "body": "2"}, headers=bearer(t2))

    r = await client.get(f"/api/users/{alice_user['id']}/posts", headers=bearer(t2))
    assert r.status_code == 200
    assert [p["title"] for p in r.json()] == ["a1"]
