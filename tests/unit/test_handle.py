"""Tests for SessionLockHandle."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from sessionlock import (
    LockAcquisitionError,
    LockAlreadyHeldError,
    LockNotHeldError,
    LockReleaseError,
    SQLServerLockService,
)
from tests.fixtures import make_scalar_result


class TestTryAcquire:
    async def test_acquired_marks_held(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(0)))

        result = await handle.try_acquire()

        assert result.acquired
        assert handle.held

    async def test_busy_leaves_unheld(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(-1)))

        result = await handle.try_acquire(timeout=0)

        assert result.busy
        assert not handle.held

    async def test_second_acquire_rejected(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        conn = make_connection(make_scalar_result(0))
        handle = service.bind(conn)
        await handle.try_acquire()

        with pytest.raises(LockAlreadyHeldError):
            await handle.try_acquire()

        assert conn.execute.await_count == 1

    async def test_retry_after_busy(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        """The caller's retry loop reuses the same handle and connection."""
        handle = service.bind(make_connection(make_scalar_result(-1), make_scalar_result(0)))

        assert (await handle.try_acquire(timeout=0)).busy
        assert (await handle.try_acquire(timeout=0)).acquired
        assert handle.held


class TestRelease:
    async def test_release_clears_held(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(0), make_scalar_result(0)))
        await handle.try_acquire()

        await handle.release()

        assert not handle.held

    async def test_release_without_hold(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        conn = make_connection()
        handle = service.bind(conn)

        with pytest.raises(LockNotHeldError):
            await handle.release()

        conn.execute.assert_not_awaited()

    async def test_failed_release_clears_held(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(0), make_scalar_result(1)))
        await handle.try_acquire()

        with pytest.raises(LockReleaseError):
            await handle.release()

        assert not handle.held


class TestHold:
    async def test_acquires_and_releases(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        conn = make_connection(make_scalar_result(0), make_scalar_result(0))
        handle = service.bind(conn)

        async with handle.hold(timeout=1) as held_handle:
            assert held_handle is handle
            assert handle.held

        assert not handle.held
        assert conn.execute.await_count == 2

    async def test_releases_on_error(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(0), make_scalar_result(0)))

        with pytest.raises(RuntimeError, match="migration failed"):
            async with handle.hold():
                raise RuntimeError("migration failed")

        assert not handle.held

    async def test_busy_raises(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(-1)))

        with pytest.raises(LockAcquisitionError) as exc_info:
            async with handle.hold(timeout=0):
                pytest.fail("body must not run")

        assert exc_info.value.raw_code == -1
        assert exc_info.value.timeout == 0
        assert "another session" in str(exc_info.value)

    async def test_fatal_raises(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        handle = service.bind(make_connection(make_scalar_result(-999)))

        with pytest.raises(LockAcquisitionError, match="primitive returned -999"):
            async with handle.hold():
                pytest.fail("body must not run")

        assert not handle.held

    async def test_explicit_release_inside_context(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        conn = make_connection(make_scalar_result(0), make_scalar_result(0))
        handle = service.bind(conn)

        async with handle.hold():
            await handle.release()

        assert conn.execute.await_count == 2

    def test_repr(
        self,
        service: SQLServerLockService,
        make_connection: Callable[..., AsyncMock],
    ) -> None:
        assert "held=False" in repr(service.bind(make_connection()))
