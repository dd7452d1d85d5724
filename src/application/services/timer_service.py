"""Timer reconciliation engine (write side).

Only state transitions of the committee timer are written to the store:

    set    -> idle(T)
    start  -> running(T, start=<server timestamp>)
    pause  -> idle(remaining)
    reset  -> idle(0)
    expiry -> idle(0), written by whichever observer first sees zero

The remaining time itself is never stored; observers compute it with
compute_remaining(). Start uses the store's server timestamp so every
observer measures elapsed time from the same instant regardless of its
local clock.

Non-applied start/pause requests are outcomes, not errors.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from src.application.ports.document_store import TransactionProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.base import LoggingMixin
from src.application.services.document_gateway import (
    DocumentGateway,
    committee_path,
    decode_committee,
)
from src.domain.errors.store import StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.committee import Committee, CommitteeId
from src.domain.models.session import SessionContext
from src.domain.models.timer import TimerState
from src.domain.services.countdown import compute_remaining, is_expired_at, pause_timer_state


class TimerCommandResult(str, Enum):
    """Outcome of a timer command."""

    APPLIED = "applied"
    ALREADY_RUNNING = "already_running"
    NO_DURATION_SET = "no_duration_set"
    NOT_RUNNING = "not_running"


def parse_duration_part(field: str, value: int | str | None) -> int:
    """Parse one minutes/seconds input.

    Blank input counts as zero. Anything that is not a whole,
    non-negative number is rejected.

    Raises:
        InvalidInputError: If the value is negative or non-numeric.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidInputError(field, "Please enter a whole number")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = int(text)
        except ValueError:
            raise InvalidInputError(field, "Please enter a whole number") from None
    if not isinstance(value, int):
        raise InvalidInputError(field, "Please enter a whole number")
    if value < 0:
        raise InvalidInputError(field, "Duration cannot be negative")
    return value


class TimerService(LoggingMixin):
    """Committee timer commands.

    Every command except mark_expired is chair-only.

    Example:
        >>> timers = TimerService(gateway, time_authority)
        >>> await timers.set_timer(session, 1, 30)
        >>> await timers.start_timer(session)
        <TimerCommandResult.APPLIED: 'applied'>
    """

    def __init__(
        self,
        gateway: DocumentGateway,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the service.

        Args:
            gateway: Typed document store access.
            time_authority: Clock used to compute remaining time on pause
                and expiry.
        """
        self._gateway = gateway
        self._time = time_authority
        self._init_logger(component="timer")

    async def set_timer(
        self,
        session: SessionContext,
        minutes: int | str | None,
        seconds: int | str | None,
    ) -> TimerState:
        """Reset the timer to idle with ``minutes * 60 + seconds``.

        Returns:
            The idle state written.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            InvalidInputError: If either part is negative or non-numeric.
            StoreUnavailableError: If the write fails.
        """
        session.require_chair("set_timer")
        total = parse_duration_part("minutes", minutes) * 60 + parse_duration_part(
            "seconds", seconds
        )
        timer = TimerState.idle(total)
        await self._write(session, "set_timer", timer)
        return timer

    async def start_timer(self, session: SessionContext) -> TimerCommandResult:
        """Start the countdown from the stored duration.

        Returns:
            APPLIED, ALREADY_RUNNING or NO_DURATION_SET.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            StoreUnavailableError: If the transaction fails.
        """
        session.require_chair("start_timer")
        path = committee_path(session.committee)
        marker = self._gateway.server_timestamp()

        async def _start(tx: TransactionProtocol) -> TimerCommandResult:
            timer = (await self._read_committee(tx, session.committee)).timer
            if timer.is_running:
                return TimerCommandResult.ALREADY_RUNNING
            if timer.total_seconds <= 0:
                return TimerCommandResult.NO_DURATION_SET
            tx.set(
                path,
                {
                    "timer": {
                        "totalSeconds": timer.total_seconds,
                        "isRunning": True,
                        "startTime": marker,
                    }
                },
                merge=True,
            )
            return TimerCommandResult.APPLIED

        return await self._transition(session, "start_timer", _start)

    async def pause_timer(self, session: SessionContext) -> TimerCommandResult:
        """Freeze the countdown at its current remaining time.

        Returns:
            APPLIED or NOT_RUNNING.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            StoreUnavailableError: If the transaction fails.
        """
        session.require_chair("pause_timer")
        path = committee_path(session.committee)

        async def _pause(tx: TransactionProtocol) -> TimerCommandResult:
            timer = (await self._read_committee(tx, session.committee)).timer
            if not timer.is_running:
                return TimerCommandResult.NOT_RUNNING
            paused = pause_timer_state(timer, self._time.now())
            tx.set(path, {"timer": paused.to_document()}, merge=True)
            return TimerCommandResult.APPLIED

        return await self._transition(session, "pause_timer", _pause)

    async def reset_timer(self, session: SessionContext) -> None:
        """Unconditionally write idle(0).

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            StoreUnavailableError: If the write fails.
        """
        session.require_chair("reset_timer")
        await self._write(session, "reset_timer", TimerState.idle(0))

    async def mark_expired(self, committee: CommitteeId) -> bool:
        """Write the expiry transition if the running timer reached zero.

        Any observer may call this; concurrent callers race harmlessly
        because the check and the write share one transaction and a timer
        that is already idle is left alone.

        Returns:
            True if this call wrote the transition.

        Raises:
            StoreUnavailableError: If the transaction fails.
        """
        path = committee_path(committee)
        log = self._log_operation("mark_expired", committee=committee.value)

        async def _expire(tx: TransactionProtocol) -> bool:
            timer = (await self._read_committee(tx, committee)).timer
            if not is_expired_at(timer, self._time.now()):
                return False
            tx.set(path, {"timer": TimerState.idle(0).to_document()}, merge=True)
            return True

        try:
            wrote = await self._gateway.run_transaction(_expire)
        except StoreUnavailableError as exc:
            log.error("timer_expiry_failed", error=str(exc))
            raise
        if wrote:
            log.info("timer_expired")
        return wrote

    def remaining(self, timer: TimerState) -> int:
        """Remaining seconds of ``timer`` right now."""
        return compute_remaining(timer, self._time.now())

    async def _read_committee(self, tx: TransactionProtocol, committee: CommitteeId) -> Committee:
        snapshot = await tx.get(committee_path(committee))
        return decode_committee(committee, snapshot) or Committee.initial(committee)

    async def _transition(
        self,
        session: SessionContext,
        operation: str,
        fn: Callable[[TransactionProtocol], Awaitable[TimerCommandResult]],
    ) -> TimerCommandResult:
        log = self._log_operation(operation, committee=session.committee.value)
        try:
            result = await self._gateway.run_transaction(fn)
        except StoreUnavailableError as exc:
            log.error("timer_command_failed", error=str(exc))
            raise
        log.info("timer_command_completed", result=result.value)
        return result

    async def _write(self, session: SessionContext, operation: str, timer: TimerState) -> None:
        log = self._log_operation(
            operation,
            committee=session.committee.value,
            total_seconds=timer.total_seconds,
        )
        try:
            await self._gateway.write_timer(session.committee, timer)
        except StoreUnavailableError as exc:
            log.error("timer_write_failed", error=str(exc))
            raise
        log.info("timer_written")
