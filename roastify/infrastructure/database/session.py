"""
Engine y sesiones async de SQLAlchemy para la base de la API.

Solo cubre las tablas propias de Roastify (users, time_entries). El mirror
trabaja con psycopg directo y no pasa por aquí.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from roastify.core.config import settings


Base = declarative_base()


def _engine_kwargs(database_url: str) -> dict:
    """Pool solo en PostgreSQL; aiosqlite (tests) no lo admite."""
    kwargs = {"echo": settings.DEBUG, "future": True}
    if database_url.startswith("postgresql"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return kwargs


engine = create_async_engine(
    settings.effective_database_url,
    **_engine_kwargs(settings.effective_database_url)
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia FastAPI: una sesión por request.

    Los casos de uso hacen commit explícito en las escrituras; aquí solo se
    hace rollback si el request termina con excepción.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Sesión para scripts fuera de FastAPI (seed, jobs)."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Crea users y time_entries si no existen (entornos sin Alembic)."""
    from roastify.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
