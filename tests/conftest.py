import asyncio
import os

# Set up environment variables before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["TRUSTED_HOSTS"] = "*"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from app.auth.jwt import TokenService
from app.auth.password import get_password_manager_for
from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_maker, create_tables, get_db
from app.core.rate_limit import limiter
from app.main import app
from app.models.user import UserRole, UserStatus
from app.repositories.user_repository import UserRepository

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        jwt_secret_key=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        # Cheap Argon2 parameters keep the suite fast
        password_time_cost=1,
        password_memory_cost=1024,
        password_parallelism=1,
        require_approval_token=False,
        trusted_hosts=["*"],
    )


@pytest.fixture
def passwords(settings):
    return get_password_manager_for(
        settings.password_time_cost,
        settings.password_memory_cost,
        settings.password_parallelism,
    )


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(
        secret_key=settings.jwt_secret_key,
        ttl=settings.token_ttl,
        issuer=settings.token_issuer,
    )


# =============================================================================
# Async (service-level) database
# =============================================================================

@pytest_asyncio.fixture
async def session(settings):
    engine = build_engine(settings.database_url, poolclass=NullPool)
    await create_tables(engine)
    maker = build_session_maker(engine)
    async with maker() as db_session:
        yield db_session
    await engine.dispose()


# =============================================================================
# HTTP-level fixtures
# =============================================================================

@pytest.fixture
def session_maker(settings):
    engine = build_engine(settings.database_url, poolclass=NullPool)
    asyncio.run(create_tables(engine))
    yield build_session_maker(engine)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(settings, session_maker):
    async def override_get_db():
        async with session_maker() as db_session:
            yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    # Per-IP counters live in process memory; start each test from zero
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def run_db(session_maker):
    """Run ``fn(session)`` against the test database and return its result."""
    def _run(fn):
        async def _go():
            async with session_maker() as db_session:
                return await fn(db_session)
        return asyncio.run(_go())
    return _run


@pytest.fixture
def create_user(run_db, passwords):
    """Insert a user directly and return its id."""
    def _create(
        email="investor@example.com",
        password="correct-horse-1",
        role=UserRole.INVESTOR,
        status=UserStatus.ACTIVE,
        first_name="Ada",
        last_name="Lovelace",
    ) -> int:
        async def _insert(db_session):
            user = await UserRepository(db_session).create(
                email=email,
                password_hash=passwords.hash(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                status=status,
            )
            return user.id
        return run_db(_insert)
    return _create


@pytest.fixture
def bearer(tokens):
    """Authorization header for an identity, without touching the database."""
    def _bearer(user_id: int, email: str = "investor@example.com", role: str = "investor", **kwargs):
        token = tokens.issue(user_id=user_id, email=email, role=role, **kwargs)
        return {"Authorization": f"Bearer {token}"}
    return _bearer
