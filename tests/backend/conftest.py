"""
Shared fixtures for PageCraft backend tests.

Every test gets its own SQLite database file through aiosqlite.
"""

from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pagecraft.core.config import Settings
from pagecraft.core.database import close_db, create_engine, create_session_factory, init_db
from pagecraft.main import create_app
from pagecraft.middleware.security import limiter
from pagecraft.services.component_registry import ComponentRegistry


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'pagecraft.db'}",
        admin_api_key="",
        page_api_base_url="",
        public_base_url="http://testserver",
    )


@pytest.fixture
def client(settings) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    limiter.reset()
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def session_factory(settings) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory on an initialized database."""
    engine = create_engine(settings)
    await init_db(engine)
    yield create_session_factory(engine)
    await close_db(engine)


@pytest.fixture
def registry() -> ComponentRegistry:
    return ComponentRegistry()
