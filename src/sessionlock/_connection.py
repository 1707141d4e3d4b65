"""
Connection handling helper for lock status queries.

The status query may run on any connection, including one checked out from
an engine just for the query, so it accepts either an AsyncEngine or an
AsyncConnection.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine


@asynccontextmanager
async def execute_with_connection(
    conn: AsyncConnection | AsyncEngine,
) -> AsyncIterator[AsyncConnection]:
    """
    Context manager for executing database operations.

    Args:
        conn: Database connection or engine; an engine lends a fresh
              connection for the duration of the block

    Yields:
        AsyncConnection ready for execute() calls

    Example:
        >>> async with execute_with_connection(engine) as conn:
        ...     result = await conn.execute(query, params)

    Note:
        Lock acquire and release never go through this helper: they must
        run on the caller's own connection, since the lock belongs to that
        session.
    """
    if isinstance(conn, AsyncEngine):
        async with conn.connect() as connection:
            yield connection
    else:
        # Caller is responsible for transaction management
        yield conn
