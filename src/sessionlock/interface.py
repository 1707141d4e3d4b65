"""
Session lock service interface and ownership record.

This module provides:
- LockInfo: Snapshot of who holds the lock and since when
- SessionLockService: Protocol implemented once per database dialect
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

    from sessionlock.handle import SessionLockHandle
    from sessionlock.outcome import LockAttemptResult


@dataclass(frozen=True)
class LockInfo:
    """
    Information about the current holder of a session lock.

    The record is only ever observed in the store's lock catalog; it exists
    while some session holds the lock and disappears when that session
    releases it or ends.

    Attributes:
        lock_name: The lock resource name
        holder_id: Host name of the holding session exactly as the server
            reports it (not trimmed), or "session_id#<id>" when the session
            reports no host name
        locked_since: Login time of the holding session. The store does not
            record when the lock itself was granted, so this is an upper bound.
        session_id: Store session identifier of the holder
    """

    lock_name: str
    holder_id: str
    locked_since: datetime | None = None
    session_id: int | None = None


@runtime_checkable
class SessionLockService(Protocol):
    """
    Protocol for session-scoped advisory lock services.

    Each implementation targets one database dialect. All operations perform a
    single round-trip on the given connection and never retry.
    """

    @property
    def lock_name(self) -> str:
        """Resource name this service locks."""
        ...

    def supports(self, connection: AsyncConnection | AsyncEngine) -> bool:
        """Whether this service can lock through the given connection."""
        ...

    async def try_acquire(
        self,
        connection: AsyncConnection,
        timeout: float | None = None,
    ) -> LockAttemptResult:
        """Make one acquire attempt, waiting at most ``timeout`` seconds."""
        ...

    async def release(self, connection: AsyncConnection) -> None:
        """Release the lock held by the connection's session."""
        ...

    async def current_holder(
        self,
        connection: AsyncConnection | AsyncEngine,
    ) -> LockInfo | None:
        """Return the current holder of the lock, or None if it is free."""
        ...

    def bind(self, connection: AsyncConnection) -> SessionLockHandle:
        """Tie the lock to one connection."""
        ...
