"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine and session maker
2. Base: declarative base shared by every ORM model
3. Database: session factory for dependency injection

Configuration:
- DATABASE_URL overrides the assembled PostgreSQL URL (tests use sqlite+aiosqlite)
- Pool sizing only applies to server databases, SQLite uses a StaticPool
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import orjson
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def build_engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith('sqlite'):
        # In-memory databases live on a single shared connection
        if ':memory:' in url or url.rstrip('/').endswith('sqlite+aiosqlite:'):
            return {
                'poolclass': StaticPool,
                'connect_args': {'check_same_thread': False},
            }
        return {'connect_args': {'check_same_thread': False, 'timeout': 15}}
    return {
        'pool_size': settings.DB_POOL_SIZE,
        'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
    }


def _json_dumps(value: Any) -> str:
    return orjson.dumps(value).decode()


def create_engine_for_url(url: str) -> AsyncEngine:
    return create_async_engine(
        url,
        echo=False,
        json_serializer=_json_dumps,
        json_deserializer=orjson.loads,
        **build_engine_kwargs(url),
    )


class AsyncEngineManager:
    """
    Keeps the async engine bound to the running event loop.

    Rebuilds the engine when the loop changes to prevent
    "Task got Future attached to a different loop" errors (TestClient, reloads).
    """

    def __init__(self, *, url: str | None = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = create_engine_for_url(self.url)
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = create_engine_for_url(self.url)
            self._loop = current_loop
        assert self._engine is not None
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


NAMING_CONVENTION = {
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'ck': 'ck_%(table_name)s_%(constraint_name)s',
    'fk': 'fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s',
    'pk': 'pk_%(table_name)s',
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


async def create_db_and_tables(engine: AsyncEngine | None = None) -> None:
    """Create tables if they don't exist (local dev and tests, production uses alembic)"""
    # Import models so they register on Base.metadata
    import src.service.booking.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️  [DB] Tables ensured')


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, rolled back on exception"""
    async with get_session_maker()() as session:
        yield session


class Database:
    """
    Session factory for dependency injection.

    Without an explicit engine it delegates to the global AsyncEngineManager;
    tests pass their own engine (e.g. in-memory SQLite).
    """

    def __init__(self, *, engine: AsyncEngine | None = None) -> None:
        self._engine = engine
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = (
            async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            if engine is not None
            else None
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine or get_engine()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session_maker = self._session_maker or get_session_maker()
        async with session_maker() as session:
            yield session
