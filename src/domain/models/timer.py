"""Committee countdown timer record.

The timer is persisted as a single ``(totalSeconds, isRunning, startTime)``
triple. The remaining time at any instant is derived from this triple and
the current time (see ``src.domain.services.countdown``); nothing ever
writes a per-second decrement.

States:
    idle     total_seconds=T, is_running=False, start_time=None
    running  total_seconds=T, is_running=True,  start_time=<instant>
    expired  idle with total_seconds=0
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.domain.errors.store import MalformedDocumentError
from src.domain.models.document_fields import (
    optional_bool,
    optional_non_negative_int,
    optional_timestamp,
)

TIMER_KIND = "timer"


@dataclass(frozen=True)
class TimerState:
    """Persisted countdown state for one committee.

    Attributes:
        total_seconds: Remaining duration as of ``start_time`` when running,
            otherwise the final remaining duration.
        is_running: Whether the countdown is currently running.
        start_time: Instant the running period began (server-assigned),
            None when not running.
    """

    total_seconds: int = 0
    is_running: bool = False
    start_time: datetime | None = None

    def __post_init__(self) -> None:
        """Validate the timer invariants.

        Raises:
            ValueError: If the duration is negative or the running flag
                and start time disagree.
        """
        if isinstance(self.total_seconds, bool) or not isinstance(self.total_seconds, int):
            raise ValueError("total_seconds must be an integer")
        if self.total_seconds < 0:
            raise ValueError(f"total_seconds must be >= 0, got {self.total_seconds}")
        if self.is_running and self.start_time is None:
            raise ValueError("a running timer requires start_time")
        if not self.is_running and self.start_time is not None:
            raise ValueError("an idle timer must not carry start_time")
        if self.start_time is not None and self.start_time.tzinfo is None:
            raise ValueError("start_time must be timezone-aware (UTC)")

    @classmethod
    def idle(cls, total_seconds: int = 0) -> TimerState:
        """Build an idle timer holding ``total_seconds``."""
        return cls(total_seconds=total_seconds, is_running=False, start_time=None)

    @property
    def is_expired(self) -> bool:
        """True for the idle, zero-duration state written on expiry or reset."""
        return not self.is_running and self.total_seconds == 0

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted map shape."""
        return {
            "totalSeconds": self.total_seconds,
            "isRunning": self.is_running,
            "startTime": self.start_time,
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> TimerState:
        """Decode a persisted timer map.

        An idle timer that still carries a stale ``startTime`` is
        normalized to ``start_time=None``; a running timer without one
        is rejected.

        Raises:
            MalformedDocumentError: If a field has the wrong type or the
                running flag has no start time.
        """
        total = optional_non_negative_int(data, TIMER_KIND, "totalSeconds")
        running = optional_bool(data, TIMER_KIND, "isRunning")
        start = optional_timestamp(data, TIMER_KIND, "startTime")
        if running and start is None:
            raise MalformedDocumentError(TIMER_KIND, "running timer without 'startTime'")
        return cls(
            total_seconds=total,
            is_running=running,
            start_time=start if running else None,
        )
