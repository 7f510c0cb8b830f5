import logging

import pytest
from opentelemetry.sdk.trace import TracerProvider

from dashboard.core.config import Settings
from dashboard.core.telemetry import (
    EMPTY_SPAN_ID,
    EMPTY_TRACE_ID,
    build_span_exporter,
    install_log_correlation,
    parse_otlp_headers,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, {}),
        ("", {}),
        ("authorization=Bearer abc", {"authorization": "Bearer abc"}),
        (" a = 1 , b=2", {"a": "1", "b": "2"}),
        ("novalue,=orphan,c=", {"c": ""}),
        ("k=a=b", {"k": "a=b"}),
    ],
)
def test_parse_otlp_headers(raw: str | None, expected: dict[str, str]) -> None:
    assert parse_otlp_headers(raw) == expected


def test_exporter_is_skipped_without_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)

    assert build_span_exporter(Settings(otel_exporter_otlp_endpoint=None)) is None


def test_log_records_carry_trace_context() -> None:
    install_log_correlation()

    untraced = logging.getLogRecordFactory()("dashboard", logging.INFO, __file__, 1, "msg", (), None)
    assert untraced.trace_id == EMPTY_TRACE_ID
    assert untraced.span_id == EMPTY_SPAN_ID

    tracer = TracerProvider().get_tracer(__name__)
    with tracer.start_as_current_span("request") as span:
        traced = logging.getLogRecordFactory()("dashboard", logging.INFO, __file__, 1, "msg", (), None)
        context = span.get_span_context()

    assert traced.trace_id == format(context.trace_id, "032x")
    assert traced.span_id == format(context.span_id, "016x")
