"""
PostgreSQL engine and sessions for the admin, agent and distribution tables.

The connection URL comes from settings: DATABASE_URL when set, otherwise it
is assembled from DB_HOST, DB_PORT, DB_USER, DB_PASS and DB_NAME.

The API keeps running when the database is down; /api/health reports it.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional
from sqlalchemy import func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from contact_distributor.core.config import settings
from contact_distributor.core.logging import setup_logger

logger = setup_logger("INFO")

Base = declarative_base()

_engine = None
_async_session_factory = None


def get_database_url() -> str:
    """asyncpg URL for the contact distributor database."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    return (
        f"postgresql+asyncpg://{settings.DB_USER}:{settings.DB_PASS}"
        f"@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )


def get_safe_database_url(url: str) -> str:
    """Render a database URL with the password masked."""
    return make_url(url).render_as_string(hide_password=True)


def init_engine():
    """Create the engine and session factory once; later calls are no-ops."""
    global _engine, _async_session_factory

    if _engine is not None:
        return

    database_url = get_database_url()
    logger.info(f"Database URL: {get_safe_database_url(database_url)}")

    try:
        _engine = create_async_engine(
            database_url,
            echo=False,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        # Agents and distributions are returned to the API after commit
        _async_session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("✅ Database engine initialized successfully")

    except Exception as e:
        logger.error(f"❌ Failed to initialize database engine: {str(e)}")
        _engine = None
        _async_session_factory = None
        raise


async def create_tables():
    """Create admin_users, agents and distributions if they are missing."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_engine() first.")

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"✅ Tables ready: {', '.join(Base.metadata.tables)}")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scoped to one repository call.

    Rolls back on any exception and always closes the session. Callers
    that need a transaction open one with session.begin().
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_engine() first.")

    session = _async_session_factory()
    try:
        yield session
    except Exception as e:
        await session.rollback()
        logger.error(f"Session error, rolled back: {str(e)}")
        raise
    finally:
        await session.close()


async def check_database_connection() -> tuple[bool, Optional[str]]:
    """Run SELECT 1; returns (is_available, error_message)."""
    if _engine is None:
        return False, "Database engine not initialized"

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        error_msg = f"Database connection failed: {str(e)}"
        logger.error(error_msg)
        return False, error_msg


async def get_database_stats() -> Dict[str, object]:
    """Masked URL, pool usage and a row count per table."""
    stats = {
        "database_url": get_safe_database_url(get_database_url()),
        "pool_size": _engine.pool.size() if _engine else 0,
        "connections_in_use": _engine.pool.checkedout() if _engine else 0,
        "row_counts": {},
    }
    if _engine is None:
        return stats

    try:
        async with _engine.connect() as conn:
            for table in Base.metadata.sorted_tables:
                result = await conn.execute(select(func.count()).select_from(table))
                stats["row_counts"][table.name] = result.scalar_one()
    except Exception as e:
        logger.error(f"Failed to count rows: {str(e)}")
        stats["error"] = str(e)

    return stats


async def close_engine():
    """Dispose of the engine on shutdown."""
    global _engine, _async_session_factory

    if _engine is None:
        return

    try:
        await _engine.dispose()
        logger.info("✅ Database engine closed successfully")
    except Exception as e:
        logger.error(f"❌ Error closing database engine: {str(e)}")
    finally:
        _engine = None
        _async_session_factory = None


async def initialize_database():
    """
    Startup sequence: engine, tables, connectivity check.

    Raises:
        RuntimeError: If the database does not answer after table creation
    """
    init_engine()
    await create_tables()

    is_available, error = await check_database_connection()
    if not is_available:
        raise RuntimeError(f"Database connection failed: {error}")

    logger.info("✅ Database initialization complete")
