"""Root conftest: shared test configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

from tests.auth_tokens import TEST_JWT_SECRET, auth_headers

# Must run before anything imports app.config / app.infrastructure.database.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="entity-service-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR / 'app.db'}"
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["JWT_JWKS_URL"] = ""
os.environ["APP_ENV"] = "test"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["ENTITY_WRITE_ROLES"] = "[]"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.infrastructure.database import Base, get_db_session  # noqa: E402
from app.main import app  # noqa: E402


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """A fresh SQLite database per test, with the schema created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """HTTP client against the real app, wired to the per-test database."""

    async def _test_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_db_session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
def headers() -> dict[str, str]:
    return auth_headers()
