"""OpenTelemetry tracing for the roles service.

One TracerProvider per process, tagged with the service name, version and
deployment environment. Inbound HTTP and /rpc requests are traced by the
FastAPI instrumentation; role operations and peer RPC calls add child
spans through ``traced``. Spans go to an OTLP collector, to the console
(local runs), or nowhere.
"""

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)

# Liveness polling and API docs are not worth a trace.
DEFAULT_EXCLUDED_URLS = "/api/v1/health,/docs,/openapi.json"


def build_span_exporter(
    exporter_type: str, otlp_endpoint: str | None = None
) -> SpanExporter | None:
    """Exporter for TELEMETRY_EXPORTER; None means spans are recorded but not shipped.

    "otlp" without an endpoint and unknown names fall back to the console.
    """
    if exporter_type == "none":
        return None
    if exporter_type == "otlp" and otlp_endpoint:
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if exporter_type != "console":
        logger.warning(
            "Span exporter %r unusable (otlp endpoint=%r); using console",
            exporter_type,
            otlp_endpoint,
        )
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider lifecycle for one roles-service process.

    Built in the lifespan when TELEMETRY_ENABLED is set, then published
    through ``set_telemetry`` so shutdown can flush it.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        enabled: bool = True,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Install the global tracer provider.

        Args:
            exporter_type: "console", "otlp" or "none".
            otlp_endpoint: Collector gRPC endpoint, e.g. http://otel-collector:4317.
            sample_rate: Fraction of root traces kept (0.0 to 1.0).

        Returns:
            The provider, or None when disabled or setup failed. Tracing
            failures never stop the service from starting.
        """
        if not self.enabled:
            logger.info("Tracing disabled for %s", self.service_name)
            return None
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
            exporter = build_span_exporter(exporter_type, otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Tracing setup failed, continuing without it: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing %s %s (%s) via %s exporter, sample rate %s",
            self.service_name,
            self.service_version,
            self.environment,
            exporter_type,
            sample_rate,
        )
        return provider

    def instrument_fastapi(
        self, app: FastAPI, excluded_urls: str = DEFAULT_EXCLUDED_URLS
    ) -> None:
        """Trace every role route and /rpc call except excluded_urls (comma-separated)."""
        if not self.enabled or not self.tracer_provider:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls=excluded_urls,
            )
        except Exception as e:
            logger.exception("Could not trace FastAPI requests: %s", e)
            return
        logger.info("Tracing FastAPI requests (excluding %s)", excluded_urls)

    def instrument_logging(self) -> None:
        """Stamp trace_id/span_id on log records so logs join their request trace."""
        if not self.enabled or not self.tracer_provider:
            return
        try:
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider,
                set_logging_format=True,
            )
        except Exception as e:
            logger.exception("Could not add trace context to logs: %s", e)

    def shutdown(self) -> None:
        """Flush pending spans; called once from the lifespan on shutdown."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Span flush on shutdown failed: %s", e)
        self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Telemetry published by the lifespan, or None."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
