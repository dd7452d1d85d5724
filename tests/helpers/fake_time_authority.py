"""FakeTimeAuthority - Controllable time authority for deterministic tests.

Countdown behaviour depends entirely on "now", so every timer test runs
against this fake instead of the host clock.

Usage Patterns:
--------------

1. Frozen Time Pattern:
    >>> fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))
    >>> assert fake_time.now() == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

2. Time Advancement Pattern (a running committee timer):
    >>> await editor.set_timer(1, 30)
    >>> await editor.start_timer()
    >>> fake_time.advance(seconds=40)
    >>> assert editor.view.timer_remaining_seconds == 50

3. Monotonic Clock:
    >>> m1 = fake_time.monotonic()
    >>> fake_time.advance(seconds=10)
    >>> assert fake_time.monotonic() - m1 == 10.0
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FAKE_TIME = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Controllable time authority for deterministic tests.

    Time never moves on its own; call advance() or set_time().

    Example:
        >>> fake_time = FakeTimeAuthority()
        >>> fake_time.advance(seconds=60)
        >>> fake_time.now().minute
        1
    """

    def __init__(
        self,
        frozen_at: datetime | None = None,
        *,
        start_monotonic: float = 0.0,
    ) -> None:
        """Initialize the fake time authority.

        Args:
            frozen_at: Instant to freeze at (default 2026-03-01T09:00 UTC).
                Naive datetimes are treated as UTC.
            start_monotonic: Starting value for the monotonic clock.
        """
        frozen_at = frozen_at or DEFAULT_FAKE_TIME
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)
        self._current_time: datetime = frozen_at
        self._monotonic_base: float = start_monotonic
        self._monotonic_advances: float = 0.0

    def now(self) -> datetime:
        """Return the controlled current time (UTC)."""
        return self._current_time

    def monotonic(self) -> float:
        """Return the controlled monotonic clock value."""
        return self._monotonic_base + self._monotonic_advances

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Advance time by ``seconds`` or ``delta``.

        Raises:
            ValueError: If neither is given or the amount is negative.
        """
        if delta is not None:
            advance_seconds = delta.total_seconds()
        elif seconds is not None:
            advance_seconds = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")

        if advance_seconds < 0:
            raise ValueError(
                f"Cannot advance time backwards. Got {advance_seconds} seconds. "
                "Use set_time() for explicit time changes."
            )
        self._current_time += timedelta(seconds=advance_seconds)
        self._monotonic_advances += advance_seconds

    def set_time(self, dt: datetime) -> None:
        """Jump to ``dt`` without touching the monotonic clock.

        Setting time backwards simulates an observer whose clock lags the
        store's clock.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self._current_time = dt

    @property
    def current_time(self) -> datetime:
        """The current controlled time."""
        return self._current_time

    def __repr__(self) -> str:
        return (
            f"FakeTimeAuthority("
            f"current_time={self._current_time.isoformat()}, "
            f"monotonic={self.monotonic():.3f})"
        )
