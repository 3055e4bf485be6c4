from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text
from hris.core.config import settings


def _engine_options(database_url: str) -> dict:
    """
    Connection pool options for the configured database.

    SQLite (used by local tooling and tests) does not accept pool sizing
    arguments, so those are only passed for server databases.
    """
    options = {"echo": settings.SQLALCHEMY_ECHO}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_timeout=30,
    )
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def check_db_connection() -> bool:
    """
    Verify database connectivity. Used by health checks.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
