"""Posts API tests.

Cover:
1. The register → login → post → ownership scenario end to end
2. Paginated listing (window, total, author filter, sort, direction)
3. Edit/delete ownership rules and 404s
"""

import pytest

from helpers import auth_headers, create_post, login, register


# ═══════════════════════════════════════════════════════════
# Scenario
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_ownership_scenario(client):
    assert (await register(client, "alice", "secret1")).status_code == 201
    assert (await register(client, "alice", "secret1")).status_code == 409
    assert (await login(client, "alice", "wrong")).status_code == 401

    r = await login(client, "alice", "secret1")
    assert r.status_code == 200
    alice = {"Authorization": f"Bearer {r.json()['id']}"}

    r = await client.post(
        "/api/v1/post",
        json={"title": "First", "subtitle": "hello", "body": "  words  "},
        headers=alice,
    )
    assert r.status_code == 201
    post = r.json()
    assert post["author"] == "alice"
    assert post["body"] == "words"

    bob = await auth_headers(client, "bob", "secret2")
    r = await client.delete(f"/api/v1/post/{post['id']}", headers=bob)
    assert r.status_code == 403
    assert r.json()["detail"] == "You can't delete this post."

    r = await client.delete(f"/api/v1/post/{post['id']}", headers=alice)
    assert r.status_code == 204

    assert (await client.get(f"/api/v1/post/{post['id']}")).status_code == 404


# ═══════════════════════════════════════════════════════════
# Listing
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_last_page(client):
    headers = await auth_headers(client, "alice")
    for i in range(25):
        await create_post(client, headers, title=f"post {i}")

    r = await client.get("/api/v1/posts", params={"limit": 10, "offset": 20})

    assert r.status_code == 200
    page = r.json()
    assert page["total"] == 25
    assert page["offset"] == 20
    assert page["limit"] == 10
    assert len(page["items"]) == 5
    assert "createdAt" in page["items"][0]


@pytest.mark.asyncio
async def test_list_defaults_to_ten_newest(client):
    headers = await auth_headers(client, "alice")
    created = [await create_post(client, headers, title=f"p{i}") for i in range(12)]

    page = (await client.get("/api/v1/posts")).json()

    assert page["limit"] == 10
    assert [p["id"] for p in page["items"]] == [p["id"] for p in reversed(created)][:10]


@pytest.mark.asyncio
async def test_list_by_author(client):
    alice = await auth_headers(client, "alice")
    bob = await auth_headers(client, "bob")
    await create_post(client, alice, title="a")
    await create_post(client, bob, title="b1")
    await create_post(client, bob, title="b2")

    page = (await client.get("/api/v1/posts", params={"author": "Bob"})).json()

    assert page["total"] == 2
    assert {p["author"] for p in page["items"]} == {"bob"}


@pytest.mark.asyncio
async def test_list_sorted_by_title_ascending(client):
    headers = await auth_headers(client, "alice")
    for title in ("banana", "cherry", "apple"):
        await create_post(client, headers, title=title)

    page = (
        await client.get("/api/v1/posts", params={"sort": "title", "direction": "asc"})
    ).json()

    assert [p["title"] for p in page["items"]] == ["apple", "banana", "cherry"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"offset": -1},
        {"offset": str(2**70)},
        {"limit": -1},
        {"limit": 101},
        {"sort": "body"},
        {"direction": "sideways"},
        {"direction": ""},
    ],
)
async def test_list_rejects_bad_params(client, params):
    r = await client.get("/api/v1/posts", params=params)
    assert r.status_code == 400
    assert r.json()["errors"]


@pytest.mark.asyncio
async def test_list_limit_zero_counts_only(client):
    headers = await auth_headers(client, "alice")
    for i in range(3):
        await create_post(client, headers, title=f"p{i}")

    page = (await client.get("/api/v1/posts", params={"limit": 0})).json()

    assert page["items"] == []
    assert page["total"] == 3


# ═══════════════════════════════════════════════════════════
# Single post
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_post(client):
    headers = await auth_headers(client, "alice")
    post = await create_post(client, headers, title="Hi", subtitle="sub", body="b")

    r = await client.get(f"/api/v1/post/{post['id']}")

    assert r.status_code == 200
    assert r.json()["subtitle"] == "sub"


@pytest.mark.asyncio
async def test_get_missing_post(client):
    r = await client.get("/api/v1/post/999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Post not found."


@pytest.mark.asyncio
async def test_create_requires_auth(client):
    r = await client.post("/api/v1/post", json={"title": "t", "body": "b"})
    assert r.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"title": "", "body": "b"},
        {"title": "x" * 101, "body": "b"},
        {"title": "t", "subtitle": "x" * 141, "body": "b"},
        {"title": "t"},
    ],
)
async def test_create_validation(client, body):
    headers = await auth_headers(client, "alice")
    r = await client.post("/api/v1/post", json=body, headers=headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_edit_own_post(client):
    headers = await auth_headers(client, "alice")
    post = await create_post(client, headers, title="Draft")

    r = await client.put(
        f"/api/v1/post/{post['id']}",
        json={"title": "Final", "subtitle": "", "body": "done"},
        headers=headers,
    )

    assert r.status_code == 200
    assert r.json()["title"] == "Final"
    assert r.json()["updatedAt"] is not None


@pytest.mark.asyncio
async def test_edit_someone_elses_post(client):
    alice = await auth_headers(client, "alice")
    bob = await auth_headers(client, "bob")
    post = await create_post(client, alice)

    r = await client.put(
        f"/api/v1/post/{post['id']}",
        json={"title": "Mine now", "body": "b"},
        headers=bob,
    )

    assert r.status_code == 403
    assert r.json()["detail"] == "You can't edit this post."


@pytest.mark.asyncio
async def test_delete_missing_post(client):
    headers = await auth_headers(client, "alice")
    r = await client.delete("/api/v1/post/12345", headers=headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_direction_is_case_insensitive(client):
    headers = await auth_headers(client, "alice")
    for title in ("one", "two", "three"):
        await create_post(client, headers, title=title)

    r = await client.get("/api/v1/posts", params={"direction": "ASC"})

    assert r.status_code == 200
    ids = [p["id"] for p in r.json()["items"]]
    assert ids == sorted(ids)


@pytest.mark.asyncio
async def test_unknown_direction_is_keyed(client):
    r = await client.get("/api/v1/posts", params={"direction": "up"})
    assert r.status_code == 400
    assert "direction" in r.json()["errors"]


# ═══════════════════════════════════════════════════════════
# Out-of-range ids
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("post_id", [0, 2**31, 2**70])
async def test_get_post_id_out_of_range(client, post_id):
    r = await client.get(f"/api/v1/post/{post_id}")
    assert r.status_code == 400
    assert "post_id" in r.json()["errors"]


@pytest.mark.asyncio
async def test_mutating_post_id_out_of_range(client):
    headers = await auth_headers(client, "alice")
    huge = 2**70

    r = await client.put(
        f"/api/v1/post/{huge}", json={"title": "t", "body": "b"}, headers=headers
    )
    assert r.status_code == 400

    r = await client.delete(f"/api/v1/post/{huge}", headers=headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_largest_post_id_is_just_missing(client):
    r = await client.get(f"/api/v1/post/{2**31 - 1}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_user_posts_offset_out_of_range(client):
    await register(client, "alice")
    r = await client.get("/api/v1/user/alice/posts", params={"offset": str(2**70)})
    assert r.status_code == 400
    assert "offset" in r.json()["errors"]
