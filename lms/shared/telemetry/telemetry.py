"""OpenTelemetry tracer provider for the LMS API.

Enabled with TELEMETRY_ENABLED. Spans go to stdout ("console") or to an
OTLP gRPC collector ("otlp"); "none" keeps the provider for in-process
sampling only. HTTP requests, SQL statements and Redis commands are
instrumented once the provider exists.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from lms.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness probes would otherwise dominate the trace volume.
UNTRACED_URLS = "/api/v1/health"


def build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Span exporter for TELEMETRY_EXPORTER; unknown kinds fall back to console."""
    if kind == "none":
        return None
    if kind == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER=otlp without an endpoint; using console")
    elif kind != "console":
        logger.warning("Unknown telemetry exporter '%s'; using console", kind)
    return ConsoleSpanExporter()


class Telemetry:
    """Owns the tracer provider and the instrumentations attached to it."""

    def __init__(self, provider: TracerProvider) -> None:
        self.provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "Telemetry | None":
        """Create and register the global tracer provider; None when setup fails."""
        resource = Resource(
            attributes={
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: settings.app_version,
                "deployment.environment": settings.telemetry_environment,
            }
        )
        try:
            provider = TracerProvider(
                resource=resource,
                sampler=TraceIdRatioBased(settings.telemetry_sample_rate),
            )
            exporter = build_exporter(
                settings.telemetry_exporter, settings.telemetry_otlp_endpoint
            )
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Tracing disabled: provider setup failed")
            return None
        logger.info(
            "Tracing enabled for %s (exporter=%s, sample_rate=%s)",
            settings.app_name,
            settings.telemetry_exporter,
            settings.telemetry_sample_rate,
        )
        return cls(provider)

    def instrument_app(self, app: FastAPI) -> None:
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.provider, excluded_urls=UNTRACED_URLS
        )

    def instrument_engine(self, engine: AsyncEngine) -> None:
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine, tracer_provider=self.provider
        )

    def instrument_redis(self) -> None:
        RedisInstrumentor().instrument(tracer_provider=self.provider)

    def shutdown(self) -> None:
        """Flush pending spans and stop the provider."""
        self.provider.shutdown()


_telemetry: Telemetry | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> Telemetry | None:
    """Process-wide telemetry set during startup, if any."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: Telemetry | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
