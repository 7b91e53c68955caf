from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
from typing import Any

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from record_jobs.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s record=%(record_id)s trace_id=%(trace_id)s %(message)s"
NO_RECORD = "-"

_current_record: ContextVar[str] = ContextVar("record_jobs_current_record", default=NO_RECORD)
_HTTPX_INSTRUMENTOR = HTTPXClientInstrumentor()
tracer = trace.get_tracer("record_jobs")


@dataclass(slots=True)
class TelemetryRuntime:
    enabled: bool
    provider: TracerProvider | None


class JobLogFilter(logging.Filter):
    """Stamps log records with the record id and trace id of the job in flight."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.record_id = _current_record.get()
        context = trace.get_current_span().get_span_context()
        record.trace_id = format(context.trace_id, "032x") if context.is_valid else NO_RECORD
        return True


def configure_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    for handler in root.handlers:
        if not any(isinstance(existing, JobLogFilter) for existing in handler.filters):
            handler.addFilter(JobLogFilter())


@contextmanager
def job_span(endpoint: str, payload: dict[str, Any]) -> Iterator[trace.Span]:
    """Trace one job request and tag logs emitted inside it with its record id."""
    record_id = str(payload.get("record_id", NO_RECORD))
    token = _current_record.set(record_id)
    try:
        with tracer.start_as_current_span("record_jobs.dispatch") as span:
            span.set_attribute("job.endpoint", endpoint)
            span.set_attribute("record.id", record_id)
            span.set_attribute("record.base_id", str(payload.get("base_id")))
            span.set_attribute("record.table_id", str(payload.get("table_id")))
            output_column = payload.get("output_column", payload.get("post_id_column"))
            if output_column is not None:
                span.set_attribute("record.output_column", str(output_column))
            yield span
    finally:
        _current_record.reset(token)


def current_record_id() -> str:
    return _current_record.get()


def setup_telemetry(settings: Settings, app: FastAPI | None = None) -> TelemetryRuntime:
    if not settings.otel_enabled:
        return TelemetryRuntime(enabled=False, provider=None)

    provider = TracerProvider(
        resource=Resource.create(
            {
                SERVICE_NAME: settings.otel_service_name,
                DEPLOYMENT_ENVIRONMENT: settings.environment,
            }
        ),
        sampler=TraceIdRatioBased(settings.otel_trace_sample_ratio),
    )
    if settings.otel_exporter_otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            headers=settings.otel_exporter_otlp_headers or None,
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
    else:
        logging.getLogger(__name__).info("no OTLP endpoint configured; job spans stay local")

    trace.set_tracer_provider(provider)
    _HTTPX_INSTRUMENTOR.instrument(tracer_provider=provider)
    if app is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    return TelemetryRuntime(enabled=True, provider=provider)


def shutdown_telemetry(runtime: TelemetryRuntime, app: FastAPI | None = None) -> None:
    if not runtime.enabled:
        return
    _HTTPX_INSTRUMENTOR.uninstrument()
    if app is not None:
        FastAPIInstrumentor.uninstrument_app(app)
    if runtime.provider is not None:
        runtime.provider.force_flush()
        runtime.provider.shutdown()
