from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from textextract.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"echo": settings.debug}
    return {
        "echo": settings.debug,
        "pool_size": 20,
        "max_overflow": 10,
        "pool_pre_ping": True,
    }


async_engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
