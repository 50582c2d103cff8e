"""OpenTelemetry setup for the sync agent.

Built from Settings in the lifespan and kept on app.state.telemetry.
Spans cover the sync agent API, gateway requests and replay passes
(see tracing.traced), plus the storage backend in use: SQLAlchemy for
the sql backend, redis-py for the redis backend.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
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

if TYPE_CHECKING:
    from whiteboard.core.config import Settings
    from whiteboard.infrastructure.storage import StorageBackend

logger = logging.getLogger(__name__)

# Liveness probes would otherwise flood the exporter.
_EXCLUDED_URLS = "/api/v1/health"


def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the span exporter for TELEMETRY_EXPORTER; None means "none"."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER=otlp without TELEMETRY_OTLP_ENDPOINT; using console")
    elif exporter_type != "console":
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider plus the instrumentations the sync agent enables."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )

    def setup(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Create the tracer provider and install it globally.

        Args:
            exporter_type: "console", "otlp" or "none".
            otlp_endpoint: OTLP gRPC collector (e.g. http://localhost:4317).
            sample_rate: Fraction of traces kept, 0.0 to 1.0.

        Returns:
            The provider, or None if setup failed (the agent runs untraced).
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(sample_rate),
            )
            exporter = _build_exporter(exporter_type, otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Failed to initialize telemetry")
            return None
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s exporter=%s sample_rate=%s",
            self.service_name,
            exporter_type,
            sample_rate,
        )
        return provider

    def instrument_app(self, app: FastAPI) -> None:
        """Trace sync agent requests and put trace ids on log records."""
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls=_EXCLUDED_URLS
            )
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider, set_logging_format=True
            )
        except Exception:
            logger.exception("Failed to instrument the sync agent API")

    def instrument_storage(self, backend: str, storage: StorageBackend) -> None:
        """Trace calls of the connected storage backend.

        Args:
            backend: STORAGE_BACKEND value (memory has nothing to instrument).
            storage: Connected storage; the sql backend exposes its engine.
        """
        if self.tracer_provider is None:
            return
        try:
            if backend == "sql" and getattr(storage, "engine", None) is not None:
                SQLAlchemyInstrumentor().instrument(
                    engine=storage.engine.sync_engine, tracer_provider=self.tracer_provider
                )
            elif backend == "redis":
                RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
            else:
                return
        except Exception:
            logger.exception("Failed to instrument %s storage", backend)
            return
        logger.info("Storage instrumentation enabled: %s", backend)

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error during telemetry shutdown")
        self.tracer_provider = None
