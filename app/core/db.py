from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.models import BaseModel
from app.settings.db import DatabaseSettings


def new_engine(settings: DatabaseSettings) -> AsyncEngine:
    url = make_url(settings.database_url)
    options = {}
    if url.get_backend_name() != "sqlite":
        options.update(pool_size=settings.pool_size, max_overflow=settings.max_overflow)
    return create_async_engine(url, echo=settings.echo, **options)


def new_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as connection:
        await connection.run_sync(BaseModel.metadata.create_all)
