"""
Database setup — engine, schema and session factory.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from orderflow.db._tables import Base

type SessionFactory = async_sessionmaker[AsyncSession]


def _is_memory(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.endswith("://"))


def create_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    if _is_memory(url):
        # One shared connection, otherwise every session sees an empty database
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
    *,
    echo: bool = False,
) -> tuple[SessionFactory, AsyncEngine]:
    """Create database and return (session_factory, engine)."""
    engine = create_engine(url, echo=echo)
    await create_schema(engine)
    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = ("SessionFactory", "create_engine", "create_schema", "create_database")
