# app/core/database.py

import ssl
from typing import AsyncGenerator

from loguru import logger
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.pool import NullPool
from sqlalchemy import text

from app.core.config import settings


# ----------------------------------------------------
# SSL for managed Postgres (Supabase pooler)
# ----------------------------------------------------
def make_ssl():
    ctx = ssl.create_default_context()
    if not settings.DB_SSL_VERIFY:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def build_engine(database_url: str) -> AsyncEngine:
    """
    Postgres goes through the pooler (no prepared statements, NullPool).
    SQLite is used for local development and the test-suite.
    """
    if database_url.startswith("postgresql"):
        logger.info("Configuring database (Postgres pooler mode)")
        return create_async_engine(
            database_url,
            echo=False,
            connect_args={
                "ssl": make_ssl(),
                "statement_cache_size": 0,           # disable prepared statements
                "prepared_statement_name_func": None,
            },
            pool_pre_ping=True,
            poolclass=NullPool,
        )

    logger.info("Configuring database (SQLite)")
    return create_async_engine(database_url, echo=False)


engine = build_engine(settings.DATABASE_URL)


# ----------------------------------------------------
# Sessions
# ----------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# ----------------------------------------------------
# Create tables
# ----------------------------------------------------
async def init_db(bind: AsyncEngine | None = None):
    # Register every table on the metadata before create_all
    from app.models import academic, achievement, student, user  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# ----------------------------------------------------
# Test Connection
# ----------------------------------------------------
async def test_connection():
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
