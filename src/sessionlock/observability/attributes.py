"""
Standard span attributes for sessionlock.

These follow OpenTelemetry semantic conventions where applicable.

Example:
    >>> from sessionlock.observability.attributes import ATTR_LOCK_NAME
    >>>
    >>> with tracer.span("sessionlock.try_acquire", {ATTR_LOCK_NAME: lock_name}):
    ...     pass
"""

# =============================================================================
# Database Attributes (OpenTelemetry Semantic Conventions)
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""Database system identifier (e.g., 'mssql')."""

ATTR_DB_OPERATION = "db.operation"
"""Stored procedure or statement kind (e.g., 'sp_getapplock')."""

# =============================================================================
# Lock Attributes
# =============================================================================

ATTR_LOCK_NAME = "sessionlock.lock.name"
"""Resource name passed to the lock primitive (string)."""

ATTR_LOCK_TIMEOUT = "sessionlock.lock.timeout"
"""Per-attempt lock timeout in milliseconds (integer)."""

ATTR_LOCK_OUTCOME = "sessionlock.lock.outcome"
"""Classified acquire outcome (acquired, busy, fatal_error)."""

ATTR_LOCK_RAW_CODE = "sessionlock.lock.raw_code"
"""Integer returned by the lock primitive."""

ATTR_LOCK_HELD = "sessionlock.lock.held"
"""Whether a holder was found by the status query (boolean)."""


__all__ = [
    "ATTR_DB_SYSTEM",
    "ATTR_DB_OPERATION",
    "ATTR_LOCK_NAME",
    "ATTR_LOCK_TIMEOUT",
    "ATTR_LOCK_OUTCOME",
    "ATTR_LOCK_RAW_CODE",
    "ATTR_LOCK_HELD",
]
