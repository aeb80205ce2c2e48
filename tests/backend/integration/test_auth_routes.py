import uuid

import pytest


pytestmark = pytest.mark.asyncio


async def register_user(client, username: str, password: str):
    return await client.post(
        "/api/register",
        json={"username": username, "password": password},
    )


async def login_user(client, username: str, password: str):
    return await client.post(
        "/api/login",
        json={"username": username, "password": password},
    )


async def test_register_and_login_flow(client):
    username = f"user_{uuid.uuid4().hex[:6]}"
    password = "StrongPass!23"

    resp = await register_user(client, username, password)
    body = resp.json()
    assert resp.status_code == 201
    assert body["message"] == "User registered successfully"
    assert body["user"]["username"] == username
    assert "password" not in str(body).lower()

    # Duplicate username should fail
    dup_resp = await register_user(client, username, password)
    assert dup_resp.status_code == 500
    assert dup_resp.json()["detail"] == "USERNAME_EXISTS"

    # Successful login
    login_resp = await login_user(client, username, password)
    assert login_resp.status_code == 200
    assert isinstance(login_resp.json()["token"], str)

    # Invalid password
    bad_login = await login_user(client, username, "wrong")
    assert bad_login.status_code == 401
    assert bad_login.json()["detail"] == "AUTH_INVALID_CREDENTIALS"


async def test_login_errors_do_not_reveal_which_part_failed(client):
    username = f"user_{uuid.uuid4().hex[:6]}"
    await register_user(client, username, "Right#Pass1")

    wrong_password = await login_user(client, username, "Wrong#Pass1")
    unknown_user = await login_user(client, "no_such_user", "Wrong#Pass1")

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


@pytest.mark.parametrize("payload", [{}, {"username": "x"}, {"password": "y"}, {"username": "", "password": ""}])
async def test_register_and_login_require_fields(client, payload):
    reg = await client.post("/api/register", json=payload)
    assert reg.status_code == 400
    assert reg.json()["detail"] == "BAD_REQUEST"

    login = await client.post("/api/login", json=payload)
    assert login.status_code == 400


async def test_protected_route_requires_token(client):
    unauth = await client.get("/api/posts")
    assert unauth.status_code == 401
    assert unauth.json()["detail"] == "AUTH_REQUIRED"

    bad = await client.get("/api/posts", headers={"Authorization": "Bearer not.a.token"})
    assert bad.status_code == 403
    assert bad.json()["detail"] == "AUTH_INVALID_TOKEN"


async def test_raw_token_header_is_accepted(client):
    username = f"user_{uuid.uuid4().hex[:6]}"
    await register_user(client, username, "Raw#Token1")
    token = (await login_user(client, username, "Raw#Token1")).json()["token"]

    resp = await client.get("/api/posts", headers={"Authorization": token})
    assert resp.status_code == 200
