from functools import lru_cache

from sqlalchemy import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from infra.config.config import get_config
from infra.db.models import Base


@lru_cache
def get_engine() -> AsyncEngine:
    storage_config = get_config().STORAGE_CONFIG

    if storage_config.DRIVER == "sqlite":
        url = URL.create(
            drivername="sqlite+aiosqlite",
            database=storage_config.SQLITE_PATH,
        )

        return create_async_engine(
            url,
            echo=storage_config.ECHO,
            pool_pre_ping=True,
        )

    if storage_config.DRIVER != "postgres":
        raise RuntimeError(f"Storage driver '{storage_config.DRIVER}' does not use a database engine")

    url = URL.create(
        drivername="postgresql+asyncpg",
        username=storage_config.USER,
        password=storage_config.PASSWORD,
        host=storage_config.HOST,
        port=storage_config.PORT,
        database=storage_config.DATABASE,
    )

    return create_async_engine(
        url,
        echo=storage_config.ECHO,
        pool_pre_ping=True,
        pool_size=storage_config.POOL_SIZE,
        max_overflow=storage_config.MAX_OVERFLOW,
        pool_timeout=storage_config.POOL_TIMEOUT,
        pool_recycle=storage_config.POOL_RECYCLE,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def close_engine() -> None:
    if get_config().STORAGE_CONFIG.DRIVER == "json":
        return

    await get_engine().dispose()


async def create_database_schema() -> None:
    async with get_engine().begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
