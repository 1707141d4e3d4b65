"""
Configuration for session lock services.

This module provides:
- SessionLockConfig: Lock identity, per-attempt timeout and the disable toggle
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from sessionlock.naming import resolve_lock_name

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# @LockTimeout is an int of milliseconds.
MAX_ACQUIRE_TIMEOUT = (2**31 - 1) / 1000


def validate_timeout(timeout: float, field: str = "acquire_timeout") -> None:
    """
    Check that a lock wait in seconds can be passed to the store.

    Raises:
        ValueError: If timeout is negative, not finite, or above MAX_ACQUIRE_TIMEOUT
    """
    if not math.isfinite(timeout):
        raise ValueError(f"{field} must be finite, got {timeout}")
    if timeout < 0:
        raise ValueError(f"{field} must be >= 0, got {timeout}")
    if timeout > MAX_ACQUIRE_TIMEOUT:
        raise ValueError(f"{field} must be <= {MAX_ACQUIRE_TIMEOUT}, got {timeout}")


@dataclass(frozen=True)
class SessionLockConfig:
    """
    Configuration for a session lock service.

    Attributes:
        schema_name: Default schema the changelog lock table lives in
        lock_table_name: Name of the changelog lock table
        acquire_timeout: Seconds a single acquire attempt may wait, between 0 and
            MAX_ACQUIRE_TIMEOUT
        disabled: When True, services report that they do not support the
            connection and handles refuse to bind

    Example:
        >>> config = SessionLockConfig(schema_name="app", acquire_timeout=2.0)
        >>> config.lock_name
        'APP.DATABASECHANGELOGLOCK'
    """

    schema_name: str = "dbo"
    lock_table_name: str = "DATABASECHANGELOGLOCK"
    acquire_timeout: float = 5.0
    disabled: bool = False

    def __post_init__(self) -> None:
        if not self.schema_name:
            raise ValueError("schema_name must not be empty")
        if not self.lock_table_name:
            raise ValueError("lock_table_name must not be empty")
        validate_timeout(self.acquire_timeout)

    @property
    def lock_name(self) -> str:
        """The resource name used for the store's lock primitive."""
        return resolve_lock_name(self.schema_name, self.lock_table_name)

    @classmethod
    def from_env(
        cls,
        prefix: str = "SESSIONLOCK_",
        environ: Mapping[str, str] | None = None,
    ) -> SessionLockConfig:
        """
        Build a config from environment variables.

        Reads ``{prefix}SCHEMA``, ``{prefix}TABLE``, ``{prefix}TIMEOUT`` and
        ``{prefix}DISABLED``. Unset variables keep the dataclass defaults.

        Args:
            prefix: Variable name prefix
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ValueError: If TIMEOUT is not a number or a value fails validation
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        timeout_raw = env.get(f"{prefix}TIMEOUT")
        disabled_raw = env.get(f"{prefix}DISABLED")

        return cls(
            schema_name=env.get(f"{prefix}SCHEMA", defaults.schema_name),
            lock_table_name=env.get(f"{prefix}TABLE", defaults.lock_table_name),
            acquire_timeout=(
                float(timeout_raw) if timeout_raw is not None else defaults.acquire_timeout
            ),
            disabled=(
                disabled_raw.strip().lower() in _TRUTHY
                if disabled_raw is not None
                else defaults.disabled
            ),
        )
