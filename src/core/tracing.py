"""
Request Tracing
Span logging for generation, preview and deploy operations.
"""

import contextvars
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator

from .errors import ForgeError
from .logging_config import get_logger

logger = get_logger(__name__)

# Context variables for trace propagation
_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")
_span_id: contextvars.ContextVar[str] = contextvars.ContextVar("span_id", default="")


@dataclass
class Span:
    """A single traced operation."""

    trace_id: str
    span_id: str
    parent_id: str
    name: str
    start_time: float
    duration: float = 0.0
    tags: dict[str, str] = field(default_factory=dict)
    error: Exception | None = None
    status_code: int = 200

    def finish(self) -> None:
        self.duration = time.monotonic() - self.start_time

    def set_error(self, error: Exception) -> None:
        """Record an error; the status follows the error classification."""
        self.error = error
        self.status_code = error.status_code if isinstance(error, ForgeError) else 500


def start_span(name: str, **tags: Any) -> Span:
    """Open a span under the current trace, starting a trace if none is active."""
    trace_id = _trace_id.get() or uuid.uuid4().hex
    span = Span(
        trace_id=trace_id,
        span_id=uuid.uuid4().hex[:16],
        parent_id=_span_id.get(),
        name=name,
        start_time=time.monotonic(),
        tags={k: str(v) for k, v in tags.items()},
    )
    _trace_id.set(trace_id)
    _span_id.set(span.span_id)
    return span


def submit(span: Span) -> None:
    fields = {
        "trace_id": span.trace_id,
        "span_id": span.span_id,
        "operation": span.name,
        "duration_ms": round(span.duration * 1000, 2),
        "status_code": span.status_code,
        **span.tags,
    }
    if span.parent_id:
        fields["parent_id"] = span.parent_id

    if span.error is not None:
        logger.warning("span_completed_with_error", error=str(span.error), **fields)
    elif span.duration > 1.0:
        logger.info("span_completed_slow", **fields)
    else:
        logger.debug("span_completed", **fields)


@asynccontextmanager
async def trace_operation_async(operation: str, **kwargs: Any) -> AsyncGenerator[Span, None]:
    """Async context manager for tracing operations."""
    parent = _span_id.get()
    span = start_span(operation, **kwargs)
    try:
        yield span
    except Exception as e:
        span.set_error(e)
        raise
    finally:
        span.finish()
        submit(span)
        _span_id.set(parent)


def get_trace_id() -> str:
    """Get current trace ID from context."""
    return _trace_id.get()


def set_trace_context(trace_id: str) -> None:
    """Adopt an incoming trace ID (e.g. from an x-trace-id header)."""
    if trace_id:
        _trace_id.set(trace_id)
