"""Countdown arithmetic for the committee timer.

Every observer derives the remaining time locally from the persisted
``(total_seconds, is_running, start_time)`` triple and its own notion of
"now". Only state transitions are written to the shared store, never
per-second decrements.
"""

from __future__ import annotations

import math
from datetime import datetime

from src.domain.models.timer import TimerState


def elapsed_seconds(timer: TimerState, now: datetime) -> int:
    """Whole seconds elapsed since the running period began.

    Returns 0 for idle timers and when ``now`` precedes ``start_time``
    (observer clock behind the server clock).
    """
    if not timer.is_running or timer.start_time is None:
        return 0
    delta = (now - timer.start_time).total_seconds()
    return max(0, math.floor(delta))


def compute_remaining(timer: TimerState, now: datetime) -> int:
    """Seconds remaining on ``timer`` at instant ``now``.

    Running timers return ``max(0, total_seconds - floor(now - start_time))``;
    idle timers return ``total_seconds`` regardless of ``now``. The result
    is monotonically non-increasing in ``now`` while running.

    Args:
        timer: Persisted timer state.
        now: The observer's current time (timezone-aware).

    Returns:
        Remaining whole seconds, never negative.
    """
    if not timer.is_running:
        return timer.total_seconds
    return max(0, timer.total_seconds - elapsed_seconds(timer, now))


def pause_timer_state(timer: TimerState, now: datetime) -> TimerState:
    """Idle state capturing what remains of ``timer`` at ``now``."""
    return TimerState.idle(compute_remaining(timer, now))


def is_expired_at(timer: TimerState, now: datetime) -> bool:
    """True if a running timer has reached zero at ``now``."""
    return timer.is_running and compute_remaining(timer, now) == 0


def format_remaining(seconds: int) -> str:
    """Format seconds as ``MM:SS`` (minutes may exceed two digits)."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
