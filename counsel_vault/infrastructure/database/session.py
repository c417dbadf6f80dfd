# counsel_vault/infrastructure/database/session.py

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Async engine for database_url. Pool sizing only applies to server databases."""
    options = {"echo": echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create tables that do not exist yet."""
    # Register ORM classes on Base.metadata before create_all.
    from counsel_vault.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
