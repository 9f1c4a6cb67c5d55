from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_error import translate_store_errors


SessionFactory = Callable[..., AsyncContextManager[AsyncSession]]


class SessionRepo:
    """
    Base for SQLAlchemy repositories.

    Works in two modes:
    - UoW mode: the unit of work injects `session`, writes join its transaction
    - Standalone mode: each call opens a short-lived session from `session_factory`
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        async with translate_store_errors(type(self).__name__):
            if self.session is not None:
                yield self.session
            elif self.session_factory is not None:
                async with self.session_factory() as session:
                    yield session
            else:
                raise RuntimeError('No session or session_factory available')
