import os

# Settings are read at import time; these must be set before anything under src/ is imported.
os.environ.setdefault("JWT_SECRET", "test-signing-secret-0123456789-abcdefghijklmnop")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from src.core.application import create_application
from src.core.config.settings import settings
from src.domain.services.auth.auth_service import AuthService
from src.domain.services.auth.password import PasswordService
from src.domain.services.auth.session import InMemorySessionStore
from src.domain.services.auth.token import TokenService
from src.infrastructure.database.async_db import Database
from src.infrastructure.dependency_injection.auth_dependencies import get_auth_service
from src.infrastructure.services.event_publisher import InMemoryEventPublisher
from tests.factories.user import create_fake_role, create_fake_tenant
from tests.utils.clock import FrozenClock
from tests.utils.user_directory import InMemoryUserDirectory

TEST_JWT_SECRET = os.environ["JWT_SECRET"]
ACCESS_TOKEN_EXPIRE_HOURS = 24
REFRESH_TOKEN_EXPIRE_DAYS = 7


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture(scope="session")
def password_service():
    """bcrypt with the minimum cost factor to keep the suite fast."""
    return PasswordService(rounds=4)


@pytest.fixture
def token_service(clock):
    return TokenService(
        secret=TEST_JWT_SECRET,
        access_token_expire_hours=ACCESS_TOKEN_EXPIRE_HOURS,
        refresh_token_expire_days=REFRESH_TOKEN_EXPIRE_DAYS,
        clock=clock,
    )


@pytest.fixture
def session_store(clock):
    return InMemorySessionStore(stripes=4, clock=clock)


@pytest.fixture
def event_publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def user_directory():
    """In-memory directory seeded with an active tenant (1) and a default role (1)."""
    directory = InMemoryUserDirectory()
    directory.add_tenant(create_fake_tenant(id=1, name="Corner Shop"))
    directory.add_role(create_fake_role(id=1, name="cashier"))
    return directory


@pytest.fixture
def auth_service(user_directory, session_store, token_service, password_service, event_publisher, clock):
    return AuthService(
        user_directory=user_directory,
        session_store=session_store,
        token_service=token_service,
        password_service=password_service,
        event_publisher=event_publisher,
        clock=clock,
    )


@pytest_asyncio.fixture
async def database():
    """A fresh in-memory SQLite database with all tables created."""
    db = Database(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def api_app(auth_service):
    """The real application with `AuthService` replaced by the in-memory one."""
    app = create_application(settings)
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(api_app):
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
