"""Async SQLAlchemy engine and session factory shared by the API process."""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

_ASYNC_SCHEMES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


def normalize_database_url(url: str) -> str:
    """Force the asyncpg driver onto plain PostgreSQL URLs."""
    for prefix, replacement in _ASYNC_SCHEMES.items():
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


database_url = normalize_database_url(settings.DATABASE_URL)
engine = create_async_engine(database_url, echo=settings.DATABASE_ECHO, pool_pre_ping=True)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request; it is closed when the request ends."""
    async with async_session_factory() as session:
        yield session
