"""
Translate driver-level failures into InfrastructureError.

Constraint violations are left alone: repositories map the ones they expect
(e.g. the active-slot unique index) to domain conflicts themselves.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

from src.platform.exception.exceptions import InfrastructureError
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def translate_store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError:
        raise
    except (OperationalError, InterfaceError, ConnectionError, TimeoutError) as e:
        Logger.base.error(f'🛑 [DB] {operation} failed: {type(e).__name__}: {e}')
        raise InfrastructureError(f'Booking store unavailable during {operation}') from e
    except DBAPIError as e:
        if not e.connection_invalidated:
            raise
        Logger.base.error(f'🛑 [DB] {operation} lost its connection: {e}')
        raise InfrastructureError(f'Booking store unavailable during {operation}') from e


def is_unique_violation(error: IntegrityError) -> bool:
    """Unique / primary key clash, as opposed to NOT NULL, check or foreign key failures"""
    return 'unique' in str(error.orig).lower()
