"""End-to-end authentication journey against the real wiring and a SQLite directory."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.lifecycle import install_services
from tests.factories.user import create_fake_role, create_fake_tenant


@pytest_asyncio.fixture
async def app(database):
    async with database.session() as session:
        session.add(create_fake_tenant(id=1, name="Corner Shop"))
        session.add(create_fake_tenant(id=2, name="Closed Shop", is_active=False))
        session.add(create_fake_role(id=1, name="cashier", permissions=["sales:create"]))
        await session.commit()

    application = create_application(settings)
    install_services(application, database, settings)
    return application


@pytest_asyncio.fixture
async def http(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_full_session_lifecycle(http, app):
    registered = await http.post(
        "/api/v1/auth/register",
        json={
            "tenant_id": 1,
            "username": "Alice",
            "password": "Secret1234",
            "email": "alice@example.com",
            "full_name": "Alice Liddell",
        },
    )
    assert registered.status_code == 201
    assert registered.json()["user"]["username"] == "alice"

    login = await http.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "Secret1234"}
    )
    assert login.status_code == 200
    tokens = login.json()
    assert tokens["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_HOURS * 3600
    assert tokens["user"]["role"]["permissions"] == ["sales:create"]
    assert tokens["user"]["last_login_at"] is not None
    assert len(app.state.session_store) == 1

    second_device = await http.post(
        "/api/v1/auth/login", json={"username": "ALICE@example.com", "password": "Secret1234"}
    )
    assert second_device.status_code == 200
    assert len(app.state.session_store) == 2

    refreshed = await http.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert refreshed.status_code == 200

    changed = await http.post(
        "/api/v1/auth/change-password",
        json={"old_password": "Secret1234", "new_password": "Another5678"},
        headers=_bearer(refreshed.json()["access_token"]),
    )
    assert changed.status_code == 200
    assert len(app.state.session_store) == 0

    for token in (tokens["access_token"], second_device.json()["access_token"]):
        rejected = await http.post("/api/v1/auth/logout", headers=_bearer(token))
        assert rejected.status_code == 401

    old_password = await http.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "Secret1234"}
    )
    assert old_password.status_code == 401

    relogin = await http.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "Another5678"}
    )
    assert relogin.status_code == 200

    logout = await http.post("/api/v1/auth/logout", headers=_bearer(relogin.json()["access_token"]))
    assert logout.status_code == 200
    assert len(app.state.session_store) == 0

    events = [e.event_type for e in app.state.event_publisher.get_published_events()]
    assert events.count("user.registered") == 1
    assert events.count("user.logged_in") == 3
    assert events.count("user.logged_out") == 1


@pytest.mark.asyncio
async def test_users_of_inactive_tenant_cannot_log_in(http, database):
    response = await http.post(
        "/api/v1/auth/register",
        json={"tenant_id": 2, "username": "bob", "password": "Secret1234"},
    )
    assert response.status_code == 201

    login = await http.post("/api/v1/auth/login", json={"username": "bob", "password": "Secret1234"})

    assert login.status_code == 401
    assert login.json() == {"detail": "Invalid credentials"}


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(http):
    body = {"tenant_id": 1, "username": "carol", "password": "Secret1234"}

    assert (await http.post("/api/v1/auth/register", json=body)).status_code == 201
    assert (await http.post("/api/v1/auth/register", json=body)).status_code == 409


@pytest.mark.asyncio
async def test_health_reports_database_and_sessions(http):
    response = await http.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["services"]["database"]["status"] == "healthy"
    assert body["services"]["session_store"]["sessions"] == 0
