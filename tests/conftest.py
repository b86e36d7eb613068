from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import infra.db.session as db_session
from infra.adapter.daily_record_repository_factory import get_daily_record_repository
from infra.config.config import get_config
from infra.db.models import Base


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("STORAGE_CONFIG__DRIVER", "json")
    monkeypatch.setenv("STORAGE_CONFIG__CHECKS_DIR", str(tmp_path / "checks"))
    monkeypatch.setenv("MONITOR_CONFIG__DEFINITION_PATH", str(tmp_path / "config.json"))
    monkeypatch.delenv("MONITOR_CONFIG__SCHEDULE_INTERVAL_SECONDS", raising=False)


@pytest.fixture(autouse=True)
def _reset_cached_singletons() -> Generator[None, None, None]:
    cacheables = [
        get_config,
        db_session.get_engine,
        db_session.get_session_factory,
        get_daily_record_repository,
    ]

    for cacheable in cacheables:
        cacheable.cache_clear()

    yield

    for cacheable in cacheables:
        cacheable.cache_clear()


@pytest.fixture(autouse=True)
def _block_postgres_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    original_create_async_engine = db_session.create_async_engine

    def guarded_create_async_engine(url, *args, **kwargs):
        if "postgresql+asyncpg" in str(url):
            raise RuntimeError("Tests must not create PostgreSQL engines")

        return original_create_async_engine(url, *args, **kwargs)

    monkeypatch.setattr(db_session, "create_async_engine", guarded_create_async_engine)


@pytest.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    pytest.importorskip("aiosqlite")

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=sqlite_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def async_client_factory() -> AsyncGenerator:
    clients: list[httpx.AsyncClient] = []

    async def _factory(app, *, raise_app_exceptions: bool = True) -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
        client = httpx.AsyncClient(transport=transport, base_url="http://testserver")
        clients.append(client)
        return client

    try:
        yield _factory
    finally:
        for client in clients:
            await client.aclose()
