"""
OpenTelemetry availability detection for sessionlock.

OpenTelemetry is an optional dependency. This module is the single place
that tries to import it.
"""

# Optional OpenTelemetry import - single source of truth
try:
    import opentelemetry.trace  # noqa: F401

    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False


__all__ = [
    "OTEL_AVAILABLE",
]
