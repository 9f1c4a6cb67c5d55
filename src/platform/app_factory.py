"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.booking.driving_adapter.http_controller.guest_controller import (
    router as guest_router,
)
from src.service.booking.driving_adapter.http_controller.pricing_controller import (
    router as pricing_router,
)
from src.service.booking.driving_adapter.http_controller.promo_code_controller import (
    router as promo_code_router,
)
from src.service.booking.driving_adapter.http_controller.referral_controller import (
    router as referral_router,
)
from src.service.booking.driving_adapter.http_controller.slot_controller import (
    router as slot_router,
)
from src.service.booking.driving_adapter.http_controller.staff_shift_controller import (
    router as staff_shift_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Car wash booking lifecycle engine',
    service_name: str = 'booking-engine',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    title = f'{settings.PROJECT_NAME}{title_suffix}'

    app = FastAPI(
        title=title,
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    tracing_config = TracingConfig(service_name=service_name)
    tracing_config.instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(slot_router, prefix='/api/slot', tags=['slot'])
    app.include_router(pricing_router, prefix='/api/pricing', tags=['pricing'])
    app.include_router(booking_router, prefix='/api/booking', tags=['booking'])
    app.include_router(promo_code_router, prefix='/api/promo_code', tags=['promo_code'])
    app.include_router(guest_router, prefix='/api/guest', tags=['guest'])
    app.include_router(referral_router, prefix='/api/referral', tags=['referral'])
    app.include_router(staff_shift_router, prefix='/api/staff_shift', tags=['staff_shift'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
