import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# ------------------------------------------------------------------
# Keep the suite off real collaborators. This must be done BEFORE
# importing app.main so the settings object never sees them.
# ------------------------------------------------------------------
os.environ["SMTP_HOST"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""

from app.main import app
from app.api.deps import get_db_session
from app.core.database import init_db
from app.models.user import UserRole

from factories import auth_headers, make_user


# ------------------------------------------------------------------
# Database: a fresh SQLite file per test
# ------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'portal_test.db'}",
        connect_args={"timeout": 30},
    )
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Uses ASGITransport() against the app, with every request getting its
    own session on the per-test database.
    """
    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.pop(get_db_session, None)


@pytest_asyncio.fixture
async def admin_user(db_session):
    return await make_user(db_session, UserRole.Admin)


@pytest_asyncio.fixture
async def admin_headers(admin_user):
    return auth_headers(admin_user)
