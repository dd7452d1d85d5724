"""Time Authority Protocol - interface for consistent timestamp provisioning.

Every service that needs "now" (pausing the countdown, projecting the
remaining time, stamping writes in the in-memory store) MUST inject a
TimeAuthorityProtocol implementation instead of reading the host clock
directly.

Benefits:
1. **Consistency**: the store and the services share one time base in tests
2. **Testability**: tests inject FakeTimeAuthority and advance time by hand
3. **Reliability**: no flaky countdown tests
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class TimerService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def remaining(self, timer: TimerState) -> int:
                return compute_remaining(timer, self._time.now())

    For production:
        Use SystemTimeAuthority from src/infrastructure/adapters/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Note:
            Use this for measuring elapsed time, not for timestamps.
            Only differences between values are meaningful.
        """
        ...
