"""
Tracing and log correlation for the API process.

Spans are exported over OTLP/HTTP when an endpoint is configured (either
`DD_OTEL_EXPORTER_OTLP_ENDPOINT` or the standard `OTEL_EXPORTER_OTLP_*`
variables); otherwise they stay in-process. Every log record carries
`trace_id`/`span_id` so request logs can be joined to traces.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from dashboard.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s trace_id=%(trace_id)s span_id=%(span_id)s %(message)s"
UNTRACED_URLS = "healthz,v1/healthcheck"
EMPTY_TRACE_ID = "0" * 32
EMPTY_SPAN_ID = "0" * 16

logger = logging.getLogger(__name__)
_default_record_factory = logging.getLogRecordFactory()
_correlation_installed = False


@dataclass(slots=True)
class TelemetryRuntime:
    enabled: bool
    provider: TracerProvider | None


def configure_api_logging(level: int = logging.INFO) -> None:
    install_log_correlation()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def setup_api_telemetry(app: FastAPI, settings: Settings) -> TelemetryRuntime:
    if not settings.otel_enabled:
        return TelemetryRuntime(enabled=False, provider=None)
    if settings.otel_log_correlation:
        install_log_correlation()

    attributes = {
        SERVICE_NAME: settings.otel_service_name,
        SERVICE_VERSION: settings.version,
        DEPLOYMENT_ENVIRONMENT: settings.environment,
    }
    provider = TracerProvider(
        resource=Resource.create(attributes),
        sampler=TraceIdRatioBased(settings.otel_trace_sample_ratio),
    )
    exporter = build_span_exporter(settings)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))

    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider, excluded_urls=UNTRACED_URLS)
    logger.info("tracing enabled service=%s exporter=%s", settings.otel_service_name, exporter is not None)
    return TelemetryRuntime(enabled=True, provider=provider)


def shutdown_api_telemetry(app: FastAPI, runtime: TelemetryRuntime) -> None:
    if not runtime.enabled:
        return
    FastAPIInstrumentor.uninstrument_app(app)
    if runtime.provider is None:
        return
    runtime.provider.force_flush()
    runtime.provider.shutdown()


def build_span_exporter(settings: Settings) -> OTLPSpanExporter | None:
    endpoint = (
        settings.otel_exporter_otlp_endpoint
        or os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
        or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    )
    if not endpoint:
        logger.info("no OTLP endpoint configured; spans stay local for service=%s", settings.otel_service_name)
        return None

    headers = parse_otlp_headers(settings.otel_exporter_otlp_headers or os.getenv("OTEL_EXPORTER_OTLP_HEADERS"))
    return OTLPSpanExporter(endpoint=endpoint, headers=headers or None)


def parse_otlp_headers(raw: str | None) -> dict[str, str]:
    """Parse `k1=v1,k2=v2`; pairs without `=` or with an empty key are dropped."""
    pairs = (item.partition("=") for item in (raw or "").split(","))
    return {key.strip(): value.strip() for key, sep, value in pairs if sep and key.strip()}


def install_log_correlation() -> None:
    global _correlation_installed
    if _correlation_installed:
        return
    logging.setLogRecordFactory(_correlated_record)
    _correlation_installed = True


def _correlated_record(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _default_record_factory(*args, **kwargs)
    context = trace.get_current_span().get_span_context()
    record.trace_id = format(context.trace_id, "032x") if context.is_valid else EMPTY_TRACE_ID
    record.span_id = format(context.span_id, "016x") if context.is_valid else EMPTY_SPAN_ID
    return record
