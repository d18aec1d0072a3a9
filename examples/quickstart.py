#!/usr/bin/env python3
"""
Inkpost Quickstart — register two users and watch ownership enforcement.

alice registers and writes a post → bob registers and tries to edit it
(403) → alice edits it (200) → a forged token is rejected (401).
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8080 (inkpost serve)
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8080/api"


def register(client: httpx.Client, name: str) -> tuple[dict, str]:
    resp = client.post("/auth/register", json={
        "username": name,
        "email": f"{name}@example.com",
        "password": f"{name}-password-123",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    data = resp.json()
    return data["user"], data["token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Redis:    {'✓' if health['redis'] == 'ok' else '✗'}")

    # ── Register alice and write a post ──────────────────────────
    print("\n1. Registering alice...")
    alice, t1 = register(client, f"alice-{run_id}")
    print(f"   alice id={alice['id']}")

    print("\n2. alice creates a post...")
    resp = client.post("/posts", json={"title": "Hello", "body": "First post"}, headers=auth(t1))
    assert resp.status_code == 201, f"Failed: {resp.text}"
    post = resp.json()
    print(f"   Post {post['id']} owned by {post['owner_id']}")

    # ── bob tries to edit it ─────────────────────────────────────
    print("\n3. Registering bob and trying to edit alice's post...")
    _, t2 = register(client, f"bob-{run_id}")
    resp = client.put(f"/posts/{post['id']}", json={"title": "Hello", "body": "bob was here"}, headers=auth(t2))
    print(f"   bob → {resp.status_code} {resp.json()['code']}")

    # ── alice edits it ───────────────────────────────────────────
    print("\n4. alice edits her post...")
    resp = client.put(f"/posts/{post['id']}", json={"title": "Hello", "body": "Edited"}, headers=auth(t1))
    print(f"   alice → {resp.status_code} body={resp.json()['body']!r}")

    # ── forged token ─────────────────────────────────────────────
    print("\n5. Deleting with a forged token...")
    header, payload, _ = t1.split(".")
    resp = client.delete(f"/posts/{post['id']}", headers=auth(f"{header}.{payload}.forged"))
    print(f"   forged → {resp.status_code} {resp.json()['code']}")

    # ── cleanup ──────────────────────────────────────────────────
    resp = client.delete(f"/posts/{post['id']}", headers=auth(t1))
    print(f"\nCleanup: post deleted ({resp.status_code})")


if __name__ == "__main__":
    main()
