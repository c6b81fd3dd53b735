from datetime import timedelta

from devtrack.config import settings
from devtrack.utils.security import create_access_token

from .conftest import signup


async def test_signup_returns_user_and_token(client):
    response = await client.post(
        "/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["name"] == "Ana"
    assert data["user"]["email"] == "ana@x.com"
    assert "id" in data["user"]
    # The hash never leaves the server
    assert "password" not in data["user"]
    assert "hashedPassword" not in data["user"]


async def test_login_after_signup_returns_usable_token(client):
    await signup(client)

    response = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"})
    assert response.status_code == 200
    token = response.json()["token"]

    tasks = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert tasks.status_code == 200
    assert tasks.json() == []


async def test_login_is_case_insensitive_on_email(client):
    await signup(client, email="Ana@X.com")

    response = await client.post("/api/auth/login", json={"email": "ANA@x.com", "password": "pw123"})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "ana@x.com"


async def test_duplicate_email_is_rejected_without_creating_a_user(client):
    await signup(client, password="first")

    response = await client.post(
        "/api/auth/signup", json={"name": "Other", "email": "ana@x.com", "password": "second"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Email already registered"

    # The original account is untouched and no second one answers to the new password
    ok = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "first"})
    assert ok.status_code == 200
    assert ok.json()["user"]["name"] == "Ana"
    bad = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "second"})
    assert bad.status_code == 400


async def test_signup_missing_fields_is_a_validation_error(client):
    response = await client.post("/api/auth/signup", json={"email": "ana@x.com"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"].startswith("Validation failed")
    fields = {d["field"] for d in body["details"]}
    assert "body.name" in fields
    assert "body.password" in fields


async def test_signup_rejects_malformed_email(client):
    response = await client.post(
        "/api/auth/signup", json={"name": "Ana", "email": "not-an-email", "password": "pw123"}
    )
    assert response.status_code == 400


async def test_login_with_wrong_password(client):
    await signup(client)
    response = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "nope"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid login credentials"}


async def test_login_with_unknown_email(client):
    response = await client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "pw123"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid login credentials"}


async def test_missing_token_is_rejected(client):
    response = await client.get("/api/tasks")
    assert response.status_code == 401
    assert response.json() == {"error": "Please authenticate"}
    assert response.headers["www-authenticate"] == "Bearer"


async def test_malformed_token_is_rejected(client):
    response = await client.get("/api/tasks", headers={"Authorization": "Bearer not.a.jwt"})
    assert response.status_code == 401


async def test_token_signed_with_another_secret_is_rejected(client):
    user, _ = await signup(client)
    forged = create_access_token({"sub": user["id"]}, secret_key="someone-else")
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


async def test_token_for_unknown_user_is_rejected(client):
    token = create_access_token({"sub": "0" * 32})
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_expired_token_is_rejected(client):
    user, _ = await signup(client)
    token = create_access_token({"sub": user["id"]}, expires_delta=timedelta(seconds=-5))
    response = await client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_tokens_without_expiry_when_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", 0)
    _, headers = await signup(client)
    response = await client.get("/api/users/me", headers=headers)
    assert response.status_code == 200


async def test_me_and_profile_update(client):
    _, headers = await signup(client)

    me = await client.get("/api/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["name"] == "Ana"

    renamed = await client.patch("/api/users/me", json={"name": "  Ana Lima "}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Ana Lima"

    login = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"})
    assert login.json()["user"]["name"] == "Ana Lima"


async def test_root_health_check(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()
