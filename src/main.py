"""
Production FastAPI Application
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Booking Engine] Starting up...')

    tracing = TracingConfig()
    tracing.setup()
    Logger.base.info('📊 [Booking Engine] OpenTelemetry tracing configured')

    # Wire dependency injection for all modules
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Engine] Dependency injection wired')

    engine = get_engine()
    tracing.instrument_sqlalchemy(engine=engine)
    if settings.DEBUG:
        # Production schema is managed by alembic
        await create_db_and_tables(engine=engine)
    Logger.base.info('🗄️  [Booking Engine] Database engine ready + instrumented')

    Logger.base.info('✅ [Booking Engine] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Booking Engine] Shutting down...')

    await container.database().engine.dispose()
    Logger.base.info('🗄️  [Booking Engine] Database engine disposed')

    # Flush remaining spans
    tracing.shutdown()

    container.unwire()

    Logger.base.info('👋 [Booking Engine] Shutdown complete')


# Create FastAPI app using shared factory
app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
