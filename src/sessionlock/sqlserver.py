"""
SQL Server session locks for distributed coordination.

Employs ``sp_getapplock`` in Session owner mode. Such a lock:
- Is independent of table/row locks
- Is not released when transactions commit or roll back
- Is released explicitly with ``sp_releaseapplock``, or implicitly when the
  session ends, normally or abnormally

Because the lock belongs to the session, acquire and release must run on the
same connection. Closing that connection is the only way to abandon an
in-flight acquire attempt.

Usage:
    >>> service = SQLServerLockService(SessionLockConfig(schema_name="dbo"))
    >>> async with engine.connect() as conn:
    ...     result = await service.try_acquire(conn, timeout=5.0)
    ...     if result.acquired:
    ...         try:
    ...             await run_migrations(conn)
    ...         finally:
    ...             await service.release(conn)
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from sessionlock._connection import execute_with_connection
from sessionlock.config import SessionLockConfig, validate_timeout
from sessionlock.exceptions import LockReleaseError, SessionLockingDisabledError
from sessionlock.handle import SessionLockHandle
from sessionlock.interface import LockInfo
from sessionlock.observability import (
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_LOCK_HELD,
    ATTR_LOCK_NAME,
    ATTR_LOCK_OUTCOME,
    ATTR_LOCK_RAW_CODE,
    ATTR_LOCK_TIMEOUT,
    Tracer,
    create_tracer,
)
from sessionlock.outcome import SQLSERVER_OUTCOMES, LockAttemptResult, OutcomeClassifier

logger = logging.getLogger(__name__)

DIALECT_NAME = "mssql"

# sys.dm_tran_locks shows at most this many characters of an application
# resource name in resource_description.
RESOURCE_DESCRIPTION_NAME_LENGTH = 30

SQL_GET_LOCK = text(
    "SET NOCOUNT ON; "
    "DECLARE @i int; "
    "EXEC @i = sp_getapplock @Resource = :resource, @LockMode = 'Exclusive', "
    "@LockOwner = 'Session', @LockTimeout = :timeout_ms; "
    "SELECT @i;"
)

SQL_RELEASE_LOCK = text(
    "SET NOCOUNT ON; "
    "DECLARE @i int; "
    "IF APPLOCK_MODE('public', :resource, 'Session') = 'NoLock' "
    "SET @i = -999; "
    "ELSE "
    "EXEC @i = sp_releaseapplock @Resource = :resource, @LockOwner = 'Session'; "
    "SELECT @i;"
)

SQL_LOCK_INFO = text(
    "SELECT TOP 1 s.session_id, l.resource_description, s.login_time, s.host_name "
    "FROM sys.dm_tran_locks l "
    "INNER JOIN sys.dm_exec_sessions s ON (s.session_id = l.request_session_id) "
    "WHERE l.request_owner_type = 'SESSION' "
    "AND l.resource_database_id = DB_ID() "
    "AND l.resource_type = 'APPLICATION' "
    "AND l.resource_description LIKE :pattern ESCAPE '\\'"
)


def _like_pattern(lock_name: str) -> str:
    """Build the resource_description LIKE pattern for a lock name."""
    visible = lock_name[:RESOURCE_DESCRIPTION_NAME_LENGTH]
    for char in ("\\", "%", "_", "["):
        visible = visible.replace(char, "\\" + char)
    return f"%{visible}%"


def _holder_id(row: Any) -> str:
    host = row["host_name"]
    if host is None or not host.strip():
        return f"session_id#{row['session_id']}"
    return str(host)


def _as_int(value: Any) -> int | None:
    return None if value is None else int(value)


class SQLServerLockService:
    """
    Session lock service for Microsoft SQL Server.

    The service is stateless apart from its configuration: it never opens,
    caches or closes connections, and never retries. Callers own the
    connection and the retry loop.

    Example:
        >>> service = SQLServerLockService()
        >>> result = await service.try_acquire(conn)
        >>> result.raise_for_error(service.lock_name)
        >>> if result.busy:
        ...     holder = await service.current_holder(engine)
        ...     print(f"Locked by {holder.holder_id} since {holder.locked_since}")
    """

    def __init__(
        self,
        config: SessionLockConfig | None = None,
        *,
        classifier: OutcomeClassifier = SQLSERVER_OUTCOMES,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ):
        """
        Initialize the lock service.

        Args:
            config: Lock configuration (defaults to SessionLockConfig())
            classifier: Result code boundaries for sp_getapplock/sp_releaseapplock
            tracer: Optional custom Tracer instance. If not provided, one is
                   created based on enable_tracing setting.
            enable_tracing: Whether to enable OpenTelemetry tracing.
                          Ignored if tracer is explicitly provided.
        """
        self._config = config or SessionLockConfig()
        self._classifier = classifier
        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    @property
    def config(self) -> SessionLockConfig:
        return self._config

    @property
    def lock_name(self) -> str:
        return self._config.lock_name

    def supports(self, connection: AsyncConnection | AsyncEngine) -> bool:
        """
        Check whether this service can lock through the given connection.

        Returns:
            True if the connection is SQL Server and session locking is enabled
        """
        return connection.dialect.name == DIALECT_NAME and not self._config.disabled

    async def try_acquire(
        self,
        connection: AsyncConnection,
        timeout: float | None = None,
    ) -> LockAttemptResult:
        """
        Make a single attempt to acquire the lock with sp_getapplock.

        Suspends for at most ``timeout`` seconds while another session holds
        the lock. BUSY and FATAL_ERROR are returned, not raised; use
        ``LockAttemptResult.raise_for_error`` to turn a failure into an
        exception.

        Args:
            connection: Connection whose session will own the lock
            timeout: Seconds to wait (defaults to config.acquire_timeout)

        Returns:
            Classified LockAttemptResult

        Raises:
            ValueError: If timeout is negative, not finite, or too large for
                @LockTimeout
        """
        if timeout is None:
            timeout = self._config.acquire_timeout
        validate_timeout(timeout, "timeout")
        timeout_ms = round(timeout * 1000)
        lock_name = self.lock_name

        with self._tracer.span(
            "sessionlock.try_acquire",
            {
                ATTR_DB_SYSTEM: DIALECT_NAME,
                ATTR_DB_OPERATION: "sp_getapplock",
                ATTR_LOCK_NAME: lock_name,
                ATTR_LOCK_TIMEOUT: timeout_ms,
            },
        ) as span:
            result = await connection.execute(
                SQL_GET_LOCK,
                {"resource": lock_name, "timeout_ms": timeout_ms},
            )
            raw_code = _as_int(result.scalar())
            attempt = self._classifier.classify_acquire(raw_code)

            if span:
                span.set_attribute(ATTR_LOCK_OUTCOME, attempt.outcome.value)
                if raw_code is not None:
                    span.set_attribute(ATTR_LOCK_RAW_CODE, raw_code)

        logger.debug(
            "sp_getapplock: lock=%s, timeout_ms=%d, code=%s, outcome=%s",
            lock_name,
            timeout_ms,
            raw_code,
            attempt.outcome.value,
        )
        return attempt

    async def release(self, connection: AsyncConnection) -> None:
        """
        Release the lock with sp_releaseapplock.

        Must be called on the connection that acquired the lock.

        Args:
            connection: Connection whose session owns the lock

        Raises:
            LockReleaseError: If the procedure did not return 0
        """
        lock_name = self.lock_name

        with self._tracer.span(
            "sessionlock.release",
            {
                ATTR_DB_SYSTEM: DIALECT_NAME,
                ATTR_DB_OPERATION: "sp_releaseapplock",
                ATTR_LOCK_NAME: lock_name,
            },
        ) as span:
            result = await connection.execute(SQL_RELEASE_LOCK, {"resource": lock_name})
            raw_code = _as_int(result.scalar())
            if span and raw_code is not None:
                span.set_attribute(ATTR_LOCK_RAW_CODE, raw_code)

            failure = self._classifier.classify_release(raw_code)
            if failure is not None:
                raise LockReleaseError(lock_name, failure, raw_code=raw_code)

        logger.debug("sp_releaseapplock: lock=%s released", lock_name)

    async def current_holder(
        self,
        connection: AsyncConnection | AsyncEngine,
    ) -> LockInfo | None:
        """
        Look up which session currently holds the lock.

        Reads sys.dm_tran_locks and sys.dm_exec_sessions; never changes lock
        state. The answer may be stale by the time it is returned.

        Args:
            connection: Any connection or engine on the same server

        Returns:
            LockInfo for the holder, or None if the lock appears free
        """
        lock_name = self.lock_name

        with self._tracer.span(
            "sessionlock.current_holder",
            {
                ATTR_DB_SYSTEM: DIALECT_NAME,
                ATTR_DB_OPERATION: "SELECT",
                ATTR_LOCK_NAME: lock_name,
            },
        ) as span:
            async with execute_with_connection(connection) as conn:
                result = await conn.execute(SQL_LOCK_INFO, {"pattern": _like_pattern(lock_name)})
                row = result.mappings().first()

            if row is None or not row["resource_description"]:
                if span:
                    span.set_attribute(ATTR_LOCK_HELD, False)
                return None

            if span:
                span.set_attribute(ATTR_LOCK_HELD, True)

            return LockInfo(
                lock_name=lock_name,
                holder_id=_holder_id(row),
                locked_since=row["login_time"],
                session_id=_as_int(row["session_id"]),
            )

    def bind(self, connection: AsyncConnection) -> SessionLockHandle:
        """
        Tie the lock to one connection.

        Raises:
            SessionLockingDisabledError: If session locking is disabled
        """
        if self._config.disabled:
            raise SessionLockingDisabledError(self.lock_name)
        return SessionLockHandle(self, connection)

    def __repr__(self) -> str:
        return f"SQLServerLockService(lock_name={self.lock_name!r})"
