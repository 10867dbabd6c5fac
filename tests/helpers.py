"""Request helpers shared by the API tests."""


async def register(client, username: str, password: str = "secret1"):
    return await client.post(
        "/api/v1/user", json={"username": username, "password": password}
    )


async def login(client, username: str, password: str = "secret1"):
    return await client.post(
        "/api/v1/login", json={"username": username, "password": password}
    )


async def auth_headers(client, username: str, password: str = "secret1") -> dict:
    """Register (if needed) and log in; return the Authorization header."""
    await register(client, username, password)
    r = await login(client, username, password)
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['id']}"}


async def create_post(client, headers: dict, title: str = "Hello", **fields):
    body = {"title": title, "subtitle": fields.get("subtitle", ""), "body": fields.get("body", "text")}
    r = await client.post("/api/v1/post", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()
