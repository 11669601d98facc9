import pytest

from src.adapters.api.v1.auth.routes.reset_password import RESET_ACKNOWLEDGEMENT
from src.core.handlers import INVALID_CREDENTIALS_DETAIL, INVALID_TOKEN_DETAIL

PASSWORD = "Secret1234"


async def _register(client, username="alice", email="alice@example.com", password=PASSWORD):
    return await client.post(
        "/api/v1/auth/register",
        json={"tenant_id": 1, "username": username, "password": password, "email": email},
    )


async def _login(client, username="alice", password=PASSWORD, **extra):
    return await client.post(
        "/api/v1/auth/login", json={"username": username, "password": password, **extra}
    )


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_register_returns_created_user_without_tokens(client):
    response = await _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["is_active"] is True
    assert "access_token" not in body
    assert "hashed_password" not in body["user"]


@pytest.mark.asyncio
async def test_register_duplicate_is_conflict(client):
    await _register(client)

    response = await _register(client, username="ALICE", email="other@example.com")

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_weak_password_is_unprocessable(client):
    response = await _register(client, password="short")

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("username", ["ab", "bad name", "x" * 101])
async def test_register_rejects_malformed_username(client, username):
    response = await _register(client, username=username)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_unknown_tenant(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"tenant_id": 99, "username": "alice", "password": PASSWORD},
    )

    assert response.status_code == 422
    assert "Unknown tenant" in response.json()["detail"]


@pytest.mark.asyncio
async def test_login_returns_tokens_and_profile(client):
    await _register(client)

    response = await _login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "Bearer"
    assert body["expires_in"] == 86400
    assert body["access_token"] and body["refresh_token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["role"]["name"] == "cashier"


@pytest.mark.asyncio
async def test_login_by_email(client):
    await _register(client)

    response = await _login(client, username="Alice@Example.com")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, user_directory):
    await _register(client)
    await _register(client, username="bob", email="bob@example.com")
    bob = await user_directory.find_by_identity_label("bob")
    bob.is_active = False

    responses = [
        await _login(client, password="WrongPassword"),
        await _login(client, username="nobody"),
        await _login(client, username="bob"),
        await _login(client, tenant_id=2),
        await _login(client, username="   "),
    ]

    for response in responses:
        assert response.status_code == 401
        assert response.json() == {"detail": INVALID_CREDENTIALS_DETAIL}


@pytest.mark.asyncio
async def test_login_with_missing_fields_is_unprocessable(client):
    response = await client.post("/api/v1/auth/login", json={"username": "alice"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_logout_revokes_token(client):
    await _register(client)
    token = (await _login(client)).json()["access_token"]

    response = await client.post("/api/v1/auth/logout", headers=_bearer(token))
    again = await client.post("/api/v1/auth/logout", headers=_bearer(token))

    assert response.status_code == 200
    assert again.status_code == 401
    assert again.json() == {"detail": INVALID_TOKEN_DETAIL}
    assert again.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer"}, {"Authorization": "Basic YWxpY2U6c2VjcmV0"}, _bearer("garbage")],
)
async def test_protected_routes_reject_missing_or_bad_tokens(client, headers):
    response = await client.post("/api/v1/auth/logout", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_TOKEN_DETAIL}


@pytest.mark.asyncio
async def test_refresh_token_cannot_be_used_as_bearer(client):
    await _register(client)
    refresh = (await _login(client)).json()["refresh_token"]

    response = await client.post("/api/v1/auth/logout", headers=_bearer(refresh))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_returns_new_pair(client):
    await _register(client)
    tokens = (await _login(client)).json()

    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"] != tokens["access_token"]
    assert body["expires_in"] == 86400


@pytest.mark.asyncio
async def test_refresh_with_access_token_is_rejected(client):
    await _register(client)
    tokens = (await _login(client)).json()

    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_TOKEN_DETAIL}


@pytest.mark.asyncio
async def test_refresh_after_logout_is_rejected(client):
    await _register(client)
    tokens = (await _login(client)).json()
    await client.post("/api/v1/auth/logout", headers=_bearer(tokens["access_token"]))

    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_TOKEN_DETAIL}


@pytest.mark.asyncio
async def test_change_password_only_accepts_post(client):
    await _register(client)
    token = (await _login(client)).json()["access_token"]

    response = await client.put(
        "/api/v1/auth/change-password",
        json={"old_password": PASSWORD, "new_password": "NewSecret987"},
        headers=_bearer(token),
    )

    assert response.status_code == 405
    assert (await _login(client)).status_code == 200


@pytest.mark.asyncio
async def test_change_password_then_old_token_fails(client):
    await _register(client)
    token = (await _login(client)).json()["access_token"]

    response = await client.post(
        "/api/v1/auth/change-password",
        json={"old_password": PASSWORD, "new_password": "NewSecret987"},
        headers=_bearer(token),
    )

    assert response.status_code == 200
    retry = await client.post("/api/v1/auth/logout", headers=_bearer(token))
    assert retry.status_code == 401
    assert (await _login(client, password="NewSecret987")).status_code == 200


@pytest.mark.asyncio
async def test_change_password_with_wrong_old_password(client):
    await _register(client)
    token = (await _login(client)).json()["access_token"]

    response = await client.post(
        "/api/v1/auth/change-password",
        json={"old_password": "NotMine123", "new_password": "NewSecret987"},
        headers=_bearer(token),
    )

    assert response.status_code == 401
    assert response.json() == {"detail": INVALID_CREDENTIALS_DETAIL}


@pytest.mark.asyncio
async def test_change_password_policy_violation(client):
    await _register(client)
    token = (await _login(client)).json()["access_token"]

    response = await client.post(
        "/api/v1/auth/change-password",
        json={"old_password": PASSWORD, "new_password": "short"},
        headers=_bearer(token),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("label", ["alice", "nobody@example.com"])
async def test_reset_password_answers_the_same_for_any_label(client, label):
    await _register(client)

    response = await client.post("/api/v1/auth/reset-password", json={"identity_label": label})

    assert response.status_code == 202
    assert response.json()["message"] == RESET_ACKNOWLEDGEMENT


@pytest.mark.asyncio
async def test_reset_password_publishes_event_for_known_identity(client, event_publisher):
    await _register(client)

    await client.post("/api/v1/auth/reset-password", json={"identity_label": "alice"})

    assert len(event_publisher.get_published_events("password.reset_requested")) == 1


@pytest.mark.asyncio
async def test_verify_email_is_not_implemented(client):
    response = await client.post("/api/v1/auth/verify-email", json={"token": "anything"})

    assert response.status_code == 501


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.post(
        "/api/v1/auth/verify-email", json={"token": "x"}, headers={"X-Request-ID": "req-123"}
    )

    assert response.headers["X-Request-ID"] == "req-123"
