"""
Shared pytest fixtures for integration tests.

Provides a SQL Server instance through testcontainers and an async engine
using the aioodbc driver.

If testcontainers, the ODBC driver or Docker is not available, tests are
automatically skipped.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Generator
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Testcontainers Detection
# ============================================================================

TESTCONTAINERS_AVAILABLE = False

try:
    from testcontainers.mssql import SqlServerContainer

    TESTCONTAINERS_AVAILABLE = True
except ImportError:
    SqlServerContainer = None  # type: ignore[assignment, misc]

AIOODBC_AVAILABLE = False

try:
    import aioodbc  # noqa: F401

    AIOODBC_AVAILABLE = True
except ImportError:
    pass


def is_docker_available() -> bool:
    """Check if Docker is available for running containers."""
    import subprocess

    try:
        result = subprocess.run(
            ["docker", "info"],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


DOCKER_AVAILABLE = is_docker_available()

MSSQL_IMAGE = "mcr.microsoft.com/mssql/server:2022-latest"
ODBC_DRIVER = os.environ.get("SESSIONLOCK_TEST_ODBC_DRIVER", "ODBC Driver 18 for SQL Server")


# ============================================================================
# SQL Server Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def mssql_container() -> Generator[Any, None, None]:
    """
    Provide SQL Server container for integration tests.

    Container is shared across all tests in the session for efficiency.
    """
    if not (TESTCONTAINERS_AVAILABLE and DOCKER_AVAILABLE and AIOODBC_AVAILABLE):
        pytest.skip("SQL Server test infrastructure not available")

    container = SqlServerContainer(MSSQL_IMAGE, dialect="mssql+aioodbc")
    container.start()

    yield container

    container.stop()


@pytest.fixture(scope="session")
def mssql_connection_url(mssql_container: Any) -> str:
    """Get an aioodbc connection URL for the container."""
    url = mssql_container.get_connection_url()
    driver = ODBC_DRIVER.replace(" ", "+")
    return f"{url}?driver={driver}&TrustServerCertificate=yes"


@pytest.fixture
async def mssql_engine(mssql_connection_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Provide SQLAlchemy async engine connected to the SQL Server container."""
    from sqlalchemy.ext.asyncio import create_async_engine

    engine = create_async_engine(mssql_connection_url, echo=False, pool_size=5)

    yield engine

    await engine.dispose()
