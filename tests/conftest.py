"""
Shared pytest fixtures for the sessionlock library tests.

This module provides:
- Mock SQLAlchemy connections whose execute() returns scripted results
- A MockTracer-backed SQLServerLockService
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncConnection

from sessionlock import SessionLockConfig, SQLServerLockService
from sessionlock.observability import MockTracer


@pytest.fixture
def make_connection() -> Callable[..., AsyncMock]:
    """
    Factory for mock AsyncConnections.

    Each positional argument is the Result returned by successive execute()
    calls.
    """

    def _make(*results: MagicMock, dialect: str = "mssql") -> AsyncMock:
        conn = AsyncMock(spec=AsyncConnection)
        conn.execute.side_effect = list(results)
        conn.dialect = MagicMock()
        conn.dialect.name = dialect
        return conn

    return _make


@pytest.fixture
def tracer() -> MockTracer:
    return MockTracer()


@pytest.fixture
def lock_config() -> SessionLockConfig:
    return SessionLockConfig(schema_name="dbo", lock_table_name="DatabaseChangeLogLock")


@pytest.fixture
def service(lock_config: SessionLockConfig, tracer: MockTracer) -> SQLServerLockService:
    """Provide an SQLServerLockService recording spans in a MockTracer."""
    return SQLServerLockService(lock_config, tracer=tracer)
