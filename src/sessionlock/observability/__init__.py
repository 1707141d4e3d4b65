"""
Observability utilities for sessionlock.

Provides the composition-based Tracer used by lock services and the span
attribute names they emit.

Example:
    >>> from sessionlock.observability import create_tracer
    >>>
    >>> class MyService:
    ...     def __init__(self, enable_tracing: bool = True):
    ...         self._tracer = create_tracer(__name__, enable_tracing)
    ...
    ...     async def run(self) -> None:
    ...         with self._tracer.span("my_service.run"):
    ...             pass

Note:
    OpenTelemetry is an optional dependency. All utilities in this module
    gracefully handle the case where OpenTelemetry is not installed.
"""

from sessionlock.observability.attributes import (
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_LOCK_HELD,
    ATTR_LOCK_NAME,
    ATTR_LOCK_OUTCOME,
    ATTR_LOCK_RAW_CODE,
    ATTR_LOCK_TIMEOUT,
)
from sessionlock.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)
from sessionlock.observability.tracing import OTEL_AVAILABLE

__all__ = [
    # Tracing utilities
    "OTEL_AVAILABLE",
    # Tracer (composition-based API)
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
    # Attributes - Database
    "ATTR_DB_SYSTEM",
    "ATTR_DB_OPERATION",
    # Attributes - Lock
    "ATTR_LOCK_NAME",
    "ATTR_LOCK_TIMEOUT",
    "ATTR_LOCK_OUTCOME",
    "ATTR_LOCK_RAW_CODE",
    "ATTR_LOCK_HELD",
]
