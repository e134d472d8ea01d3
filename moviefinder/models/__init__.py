from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from moviefinder.logger import get_logger

logger = get_logger()

# Bumping this drops and recreates every table on next start
SCHEMA_VERSION = 1

# Create declarative base
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_and_sessions(database_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create the async engine and its session factory."""
    engine = create_async_engine(database_url)
    if engine.dialect.name == "sqlite":
        # actors.movie_id cascade only works with FK enforcement on
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    return engine, session_factory


async def init_models(engine: AsyncEngine):
    """Create tables, recreating them when the stored schema version differs."""
    async with engine.begin() as conn:
        if engine.dialect.name == "sqlite":
            stored_version = (await conn.execute(text("PRAGMA user_version"))).scalar()
            if stored_version != SCHEMA_VERSION:
                if stored_version:
                    logger.warning(
                        f"Schema version {stored_version} != {SCHEMA_VERSION}, dropping all tables"
                    )
                await conn.run_sync(Base.metadata.drop_all)
                await conn.execute(text(f"PRAGMA user_version = {SCHEMA_VERSION}"))
        await conn.run_sync(Base.metadata.create_all)


# Register tables on Base.metadata
from moviefinder.models.movie import Movie  # noqa: E402
from moviefinder.models.actor import Actor  # noqa: E402

__all__ = [
    "Base",
    "Movie",
    "Actor",
    "SCHEMA_VERSION",
    "create_engine_and_sessions",
    "init_models",
]
