"""
Test Configuration and Fixtures

This module provides:
- Environment setup (SQLite database, log directory) before app modules import settings
- Async engine / unit of work fixtures backed by aiosqlite
- A TestClient fixture running the test app with a fresh in-memory database
- Token helpers for customer, staff and manager requests

Architecture:
- Unit tests (test/**/unit/): pure domain logic or use cases with AsyncMock repositories
- Integration tests (test/**/integration/): real repositories against SQLite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['DEBUG'] = 'true'
    os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_pytest_only')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine  # noqa: E402

from src.platform.database.orm_db_setting import (  # noqa: E402
    Base,
    Database,
    create_db_and_tables,
    create_engine_for_url,
)
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from src.service.booking.domain.enum.booking_enums import UserRole  # noqa: E402
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth  # noqa: E402
from test.constants import (  # noqa: E402
    CUSTOMER_ID,
    CUSTOMER_NAME,
    CUSTOMER_PHONE,
    MANAGER_EMAIL,
    MANAGER_ID,
    STAFF_EMAIL,
    STAFF_ID,
)


# =============================================================================
# Database fixtures
# =============================================================================
@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with every table created, dropped after the test"""
    test_engine = create_engine_for_url('sqlite+aiosqlite:///:memory:')
    await create_db_and_tables(test_engine)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def file_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """
    File-backed SQLite engine.

    Each session gets its own connection, so two units of work really run
    side by side (needed for the concurrent booking tests).
    """
    test_engine = create_engine_for_url(f'sqlite+aiosqlite:///{tmp_path / "booking.db"}')
    await create_db_and_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def database(engine: AsyncEngine) -> Database:
    return Database(engine=engine)


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    """A new unit of work per call, like the container's Factory provider"""
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


# =============================================================================
# HTTP fixtures
# =============================================================================
@pytest.fixture
def client() -> Iterator[TestClient]:
    """
    TestClient over the test app.

    Every client starts a new event loop, and the engine manager builds a new
    in-memory database for it, so tests never share rows.
    """
    from test.test_main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope='session')
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.fixture
def customer_headers(jwt_auth: JwtAuth) -> dict[str, str]:
    token = jwt_auth.create_jwt_token(
        user_id=CUSTOMER_ID, role=UserRole.CUSTOMER, phone=CUSTOMER_PHONE, name=CUSTOMER_NAME
    )
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def staff_headers(jwt_auth: JwtAuth) -> dict[str, str]:
    token = jwt_auth.create_jwt_token(user_id=STAFF_ID, role=UserRole.STAFF, email=STAFF_EMAIL)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def manager_headers(jwt_auth: JwtAuth) -> dict[str, str]:
    token = jwt_auth.create_jwt_token(
        user_id=MANAGER_ID, role=UserRole.MANAGER, email=MANAGER_EMAIL
    )
    return {'Authorization': f'Bearer {token}'}
