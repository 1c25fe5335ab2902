import importlib
import logging
import os

from opentelemetry import trace

logger = logging.getLogger(__name__)

_TRACER_NAME = "appliance_support"

# (label, module, instrumentor class)
_INSTRUMENTORS = (
    ("SQLAlchemy", "opentelemetry.instrumentation.sqlalchemy", "SQLAlchemyInstrumentor"),
    ("Celery", "opentelemetry.instrumentation.celery", "CeleryInstrumentor"),
    ("httpx", "opentelemetry.instrumentation.httpx", "HTTPXClientInstrumentor"),
    ("logging", "opentelemetry.instrumentation.logging", "LoggingInstrumentor"),
)


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return an OTel tracer; a no-op tracer when tracing is not configured."""
    return trace.get_tracer(name or _TRACER_NAME)


def _instrument(label: str, module_name: str, class_name: str) -> None:
    try:
        instrumentor = getattr(importlib.import_module(module_name), class_name)()
        if label == "SQLAlchemy":
            from app.db import get_engine

            instrumentor.instrument(engine=get_engine())
        elif label == "logging":
            instrumentor.instrument(set_logging_format=True)
        else:
            instrumentor.instrument()
        logger.info("otel_instrumented target=%s", label)
    except Exception:
        logger.warning("otel_instrumentation_unavailable target=%s", label, exc_info=True)


def setup_otel(app) -> None:
    """Configure OpenTelemetry tracing when ``OTEL_ENABLED`` is set.

    Every instrumentor is optional; a missing package is logged and skipped.
    """
    enabled = os.getenv("OTEL_ENABLED", "false").lower() in {"1", "true", "yes", "on"}
    if not enabled:
        return

    try:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except Exception:
        logger.exception("otel_sdk_unavailable")
        return

    service_name = os.getenv("OTEL_SERVICE_NAME", _TRACER_NAME)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    exporter = OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces") if endpoint else OTLPSpanExporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))

    try:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.info("otel_instrumented target=FastAPI")
    except Exception:
        logger.warning("otel_instrumentation_unavailable target=FastAPI", exc_info=True)

    for label, module_name, class_name in _INSTRUMENTORS:
        _instrument(label, module_name, class_name)

    logger.info("otel_enabled service=%s", service_name)
