"""OpenTelemetry tracing for compaction attempts.

Only the OpenTelemetry API is used; spans are exported by whatever tracer provider
the host application installs. Set ``CONDENSE_OTEL_ENABLED=false`` to force a
no-op tracer.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

logger = logging.getLogger(__name__)

# Global state
_tracer: trace.Tracer | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the tracer used by compaction spans."""
    global _tracer
    if _tracer is None:
        if os.getenv("CONDENSE_OTEL_ENABLED", "true").lower() != "true":
            _tracer = trace.NoOpTracer()
        else:
            service_name = os.getenv("CONDENSE_OTEL_SERVICE_NAME", "condense")
            _tracer = trace.get_tracer(service_name)
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer so the next call re-reads the environment."""
    global _tracer
    _tracer = None


def mark_span_error(span: Span, error: BaseException) -> None:
    """Record an exception on a span and set its status to ERROR."""
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))
