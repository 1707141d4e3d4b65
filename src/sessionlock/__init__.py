"""
sessionlock - Session-scoped database locks for Python.

Serializes a long-running operation, such as a schema migration, across
processes by delegating to the database's own session lock primitive
(SQL Server ``sp_getapplock``). The lock lives as long as the session that
took it, so a crashed process never leaves it behind.

Example:
    >>> from sessionlock import SessionLockConfig, SQLServerLockService
    >>>
    >>> service = SQLServerLockService(SessionLockConfig(schema_name="dbo"))
    >>> async with engine.connect() as conn:
    ...     async with service.bind(conn).hold(timeout=5.0):
    ...         await run_migrations(conn)
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sessionlock-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from sessionlock.config import SessionLockConfig
from sessionlock.exceptions import (
    LockAcquisitionError,
    LockAlreadyHeldError,
    LockError,
    LockNotHeldError,
    LockReleaseError,
    SessionLockError,
    SessionLockingDisabledError,
)
from sessionlock.handle import SessionLockHandle
from sessionlock.interface import LockInfo, SessionLockService
from sessionlock.naming import resolve_lock_name
from sessionlock.outcome import (
    SQLSERVER_OUTCOMES,
    LockAttemptResult,
    LockOutcome,
    OutcomeClassifier,
)
from sessionlock.sqlserver import SQLServerLockService

__all__ = [
    "__version__",
    # Configuration
    "SessionLockConfig",
    "resolve_lock_name",
    # Outcomes
    "LockOutcome",
    "LockAttemptResult",
    "OutcomeClassifier",
    "SQLSERVER_OUTCOMES",
    # Services
    "SessionLockService",
    "SQLServerLockService",
    "SessionLockHandle",
    "LockInfo",
    # Exceptions
    "SessionLockError",
    "LockError",
    "LockAcquisitionError",
    "LockReleaseError",
    "LockNotHeldError",
    "LockAlreadyHeldError",
    "SessionLockingDisabledError",
]
