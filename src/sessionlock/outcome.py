"""
Classification of lock primitive result codes.

Store lock primitives report their result as a single integer. The ranges
that mean "granted", "not granted" and "failed" differ per store, so they are
kept as data on an OutcomeClassifier instance rather than in the services.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sessionlock.exceptions import LockAcquisitionError


class LockOutcome(Enum):
    """Outcome of a single acquire attempt."""

    ACQUIRED = "acquired"
    BUSY = "busy"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class LockAttemptResult:
    """
    Result of a single acquire attempt.

    Attributes:
        outcome: Classified outcome
        raw_code: Integer returned by the primitive (None if it returned nothing)
        detail: Failure description, set only for FATAL_ERROR
    """

    outcome: LockOutcome
    raw_code: int | None = None
    detail: str | None = None

    @property
    def acquired(self) -> bool:
        return self.outcome is LockOutcome.ACQUIRED

    @property
    def busy(self) -> bool:
        return self.outcome is LockOutcome.BUSY

    @property
    def failed(self) -> bool:
        return self.outcome is LockOutcome.FATAL_ERROR

    def raise_for_error(self, lock_name: str, timeout: float | None = None) -> None:
        """
        Raise LockAcquisitionError if the attempt failed.

        BUSY is not an error here; the caller decides whether to retry.

        Raises:
            LockAcquisitionError: If outcome is FATAL_ERROR
        """
        if self.failed:
            raise LockAcquisitionError(
                lock_name,
                self.detail or "lock primitive failed",
                raw_code=self.raw_code,
                timeout=timeout,
            )


def _describe(raw_code: int | None) -> str:
    if raw_code is None:
        return "primitive returned no result"
    return f"primitive returned {raw_code}"


@dataclass(frozen=True)
class OutcomeClassifier:
    """
    Maps raw primitive result codes onto outcomes.

    Attributes:
        fatal_below: Acquire codes strictly below this value are fatal errors
        granted_from: Acquire codes at or above this value mean granted;
            codes in [fatal_below, granted_from) mean busy
        release_success: The only release code that counts as success
    """

    fatal_below: int
    granted_from: int
    release_success: int = 0

    def classify_acquire(self, raw_code: int | None) -> LockAttemptResult:
        if raw_code is None or raw_code < self.fatal_below:
            return LockAttemptResult(
                LockOutcome.FATAL_ERROR,
                raw_code=raw_code,
                detail=_describe(raw_code),
            )
        if raw_code < self.granted_from:
            return LockAttemptResult(LockOutcome.BUSY, raw_code=raw_code)
        return LockAttemptResult(LockOutcome.ACQUIRED, raw_code=raw_code)

    def classify_release(self, raw_code: int | None) -> str | None:
        """Return a failure description, or None if the release was clean."""
        if raw_code is not None and raw_code == self.release_success:
            return None
        if raw_code is None:
            return "primitive returned NULL"
        return _describe(raw_code)


# sp_getapplock: 0 granted, 1 granted after wait, -1 timeout, -2 cancelled,
# -3 deadlock victim, -999 parameter or call error.
SQLSERVER_OUTCOMES = OutcomeClassifier(fatal_below=-3, granted_from=0, release_success=0)
