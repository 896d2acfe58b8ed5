"""
OpenTelemetry tracing for the FastAPI app.

Spans are exported over OTLP/gRPC when OTEL_EXPORTER_OTLP_ENDPOINT is set;
otherwise the app is left uninstrumented. The provider is attached to the app
only, never registered as the process-wide global.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from home_service.core.config import Settings

logger = logging.getLogger("home_service.tracing")


def configure_tracing(
    app: FastAPI,
    settings: Settings,
    exporter: Optional[SpanExporter] = None,
) -> Optional[TracerProvider]:
    """Instrument the app; an explicit exporter is flushed synchronously."""
    if exporter is not None:
        processor = SimpleSpanProcessor(exporter)
    elif settings.otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint))
    else:
        return None

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: settings.service_name}))
    provider.add_span_processor(processor)
    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    logger.info("Tracing enabled for %s", settings.service_name)
    return provider
