"""Library exceptions for the sessionlock package."""


class SessionLockError(Exception):
    """Base exception for sessionlock library."""

    pass


class LockError(SessionLockError):
    """
    Raised when the store's lock primitive reports a failure.

    Attributes:
        lock_name: The lock name the primitive was called with
        detail: Description of the failure
        raw_code: The integer returned by the primitive (None if absent)
    """

    def __init__(self, lock_name: str, detail: str, raw_code: int | None = None) -> None:
        self.lock_name = lock_name
        self.detail = detail
        self.raw_code = raw_code
        super().__init__(f"Lock '{lock_name}': {detail}")


class LockAcquisitionError(LockError):
    """
    Raised when a lock cannot be acquired.

    Attributes:
        timeout: The per-attempt timeout in seconds, if known
    """

    def __init__(
        self,
        lock_name: str,
        detail: str,
        raw_code: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.timeout = timeout
        super().__init__(lock_name, detail, raw_code)


class LockReleaseError(LockError):
    """Raised when the release primitive does not report a clean release."""

    pass


class LockNotHeldError(SessionLockError):
    """Raised when releasing through a handle that does not hold the lock."""

    def __init__(self, lock_name: str) -> None:
        self.lock_name = lock_name
        super().__init__(f"Lock '{lock_name}' is not held by this handle")


class LockAlreadyHeldError(SessionLockError):
    """Raised on a second acquire through a handle that already holds the lock."""

    def __init__(self, lock_name: str) -> None:
        self.lock_name = lock_name
        super().__init__(f"Lock '{lock_name}' is already held by this handle")


class SessionLockingDisabledError(SessionLockError):
    """Raised when binding a handle while session locking is disabled."""

    def __init__(self, lock_name: str) -> None:
        self.lock_name = lock_name
        super().__init__(f"Session locking is disabled; cannot lock '{lock_name}'")
