"""
Connection-bound session lock handle.

A session lock belongs to a database session, so whoever holds the connection
holds the lock. SessionLockHandle pairs one connection with one lock service,
remembers whether this handle holds the lock, and serializes lock operations
on that connection.

Usage:
    >>> handle = service.bind(conn)
    >>> async with handle.hold(timeout=5.0):
    ...     await run_migrations(conn)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sessionlock.exceptions import (
    LockAcquisitionError,
    LockAlreadyHeldError,
    LockNotHeldError,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection

    from sessionlock.interface import SessionLockService
    from sessionlock.outcome import LockAttemptResult

logger = logging.getLogger(__name__)


class SessionLockHandle:
    """
    The lock as held (or not) by a single connection.

    The handle is not re-entrant: acquiring twice without releasing raises
    LockAlreadyHeldError, since the store would count the second grant and
    a single release would leave the lock held.

    Note:
        ``held`` reflects what this handle observed. If the connection is
        closed behind its back, the store releases the lock but the handle
        still reports it as held until release() is called.
    """

    def __init__(self, service: SessionLockService, connection: AsyncConnection) -> None:
        self._service = service
        self._connection = connection
        self._held = False
        self._lock = asyncio.Lock()

    @property
    def lock_name(self) -> str:
        return self._service.lock_name

    @property
    def connection(self) -> AsyncConnection:
        return self._connection

    @property
    def held(self) -> bool:
        return self._held

    async def try_acquire(self, timeout: float | None = None) -> LockAttemptResult:
        """
        Make one acquire attempt on the bound connection.

        Raises:
            LockAlreadyHeldError: If this handle already holds the lock
        """
        async with self._lock:
            if self._held:
                raise LockAlreadyHeldError(self.lock_name)
            result = await self._service.try_acquire(self._connection, timeout)
            self._held = result.acquired
            return result

    async def release(self) -> None:
        """
        Release the lock on the bound connection.

        The handle stops reporting the lock as held even if the release
        fails, because the session's lock state is then unknown.

        Raises:
            LockNotHeldError: If this handle does not hold the lock
            LockReleaseError: If the store did not report a clean release
        """
        async with self._lock:
            if not self._held:
                raise LockNotHeldError(self.lock_name)
            try:
                await self._service.release(self._connection)
            finally:
                self._held = False

    @asynccontextmanager
    async def hold(self, timeout: float | None = None) -> AsyncIterator[SessionLockHandle]:
        """
        Acquire the lock for the duration of a context.

        Makes a single attempt; retrying is left to the caller.

        Args:
            timeout: Seconds to wait (defaults to the service's configured timeout)

        Yields:
            This handle

        Raises:
            LockAcquisitionError: If the lock is busy or the attempt failed
        """
        result = await self.try_acquire(timeout)
        if result.busy:
            raise LockAcquisitionError(
                self.lock_name,
                "lock held by another session",
                raw_code=result.raw_code,
                timeout=timeout,
            )
        result.raise_for_error(self.lock_name, timeout)

        try:
            yield self
        finally:
            if self._held:
                await self.release()
            else:
                logger.debug("Lock %s already released before context exit", self.lock_name)

    def __repr__(self) -> str:
        return f"SessionLockHandle(lock_name={self.lock_name!r}, held={self._held})"
