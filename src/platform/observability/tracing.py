"""
OpenTelemetry tracing for the booking engine

Provides:
- Tracer provider setup with OTLP export (Jaeger / Tempo) or console output
- Auto-instrumentation for FastAPI routes and the SQLAlchemy engine
- Error tagging so slot conflicts and rejected selections are searchable in traces

Exporters are configured from settings (OTEL_EXPORTER_OTLP_ENDPOINT,
OTEL_CONSOLE_EXPORT). Without an endpoint, spans are created but not exported.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace import Status, StatusCode

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig()
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=engine)

    Use cases open their own spans with `trace.get_tracer(__name__)`.
    """

    def __init__(
        self,
        *,
        service_name: str | None = None,
        otlp_endpoint: str | None = None,
        enable_console: bool | None = None,
    ) -> None:
        self.service_name = service_name or settings.OTEL_SERVICE_NAME
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.enable_console = (
            settings.OTEL_CONSOLE_EXPORT if enable_console is None else enable_console
        )
        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        resource = Resource(
            attributes={SERVICE_NAME: self.service_name, SERVICE_VERSION: settings.VERSION}
        )
        # Sample everything; volume control happens in the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )
        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any) -> None:
        # Health checks and scrapes would drown the booking traffic
        FastAPIInstrumentor.instrument_app(app, excluded_urls='health,metrics')

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        sync_engine = getattr(engine, 'sync_engine', engine)
        SQLAlchemyInstrumentor().instrument(engine=sync_engine)

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()


def record_error_on_span(error: CustomBaseError) -> None:
    """
    Tag the active request span with the booking error kind.

    Client errors (4xx) stay OK so dashboards only alert on 5xx, but the kind
    (e.g. SlotNoLongerAvailable) is kept as an attribute for searching.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return
    span.set_attribute('booking.error.kind', type(error).__name__)
    span.set_attribute('booking.error.status_code', error.status_code)
    if error.status_code >= 500:
        span.set_status(Status(StatusCode.ERROR, error.message))
