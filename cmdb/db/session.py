"""
Database Session Management and Configuration with PostgreSQL (Async)
"""

import asyncio
import logging
import os
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

load_dotenv()
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "")
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

DB_CONNECT_ATTEMPTS = 10
DB_CONNECT_INTERVAL_SECONDS = 2.0

Base = declarative_base()

engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker] = None


def to_async_url(url: str) -> str:
    """Point plain PostgreSQL URLs at the asyncpg driver"""
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://") :]
    return url


def configure_engine(url: str, **engine_kwargs) -> AsyncEngine:
    """Create the engine and session factory used by get_db"""
    global engine, SessionLocal

    engine = create_async_engine(
        to_async_url(url),
        echo=DEBUG,
        future=True,
        **engine_kwargs,
    )
    SessionLocal = async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    return engine


def get_engine() -> AsyncEngine:
    if engine is None:
        if not DATABASE_URL:
            raise RuntimeError("DATABASE_URL environment variable is required")
        configure_engine(DATABASE_URL, pool_pre_ping=True)
    return engine


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session"""
    get_engine()
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def wait_for_db(
    attempts: int = DB_CONNECT_ATTEMPTS,
    interval: float = DB_CONNECT_INTERVAL_SECONDS,
) -> None:
    """Ping the database until it answers or the attempts run out"""
    db_engine = get_engine()
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            async with db_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Successfully connected to database")
            return
        except (SQLAlchemyError, OSError) as e:
            last_error = e
            logger.warning(
                f"Database connection attempt {attempt}/{attempts} failed: {str(e)}"
            )
            if attempt < attempts:
                await asyncio.sleep(interval)

    raise RuntimeError(
        f"Failed to ping database after {attempts} attempts"
    ) from last_error


async def init_db():
    """Wait for the database and create missing tables"""
    await wait_for_db()

    from cmdb.models.api_key_model import APIKey  # noqa: F401
    from cmdb.models.group_model import ServerGroup  # noqa: F401
    from cmdb.models.permission_model import UserServerPermission  # noqa: F401
    from cmdb.models.server_model import Server  # noqa: F401
    from cmdb.models.ssl_certificate_model import SSLCertificate  # noqa: F401
    from cmdb.models.user_model import User, UserRole  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created successfully")


async def close_db():
    """Close database connection"""
    if engine is not None:
        await engine.dispose()
