"""Resolution mutation engine.

Applies clause insertions and header saves to the active bloc's
resolution under the committee's editing lock.

Guards run before any write:
1. An active bloc must be resolved from the session.
2. A delegate may not write while the committee is locked.

Clause insertion is a single store transaction that reads the lock flag
and the bloc together, so the operative number assigned to a clause is
always one plus the list length observed by that same atomic read.
Concurrent inserters are serialized by the store's optimistic retry, so
numbers are gap-free and never collide.

Header saves are invoked on every keystroke; a lock-blocked header save
is logged and reported as EDITING_LOCKED without raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.application.ports.document_store import TransactionProtocol
from src.application.services.base import LoggingMixin
from src.application.services.document_gateway import (
    DocumentGateway,
    bloc_path,
    committee_path,
    decode_bloc,
    decode_committee,
)
from src.domain.errors.session import NoActiveBlocError
from src.domain.errors.store import DocumentNotFoundError, StoreUnavailableError
from src.domain.errors.validation import InvalidInputError
from src.domain.models.committee import Committee
from src.domain.models.resolution import ClauseKind, ResolutionHeader
from src.domain.models.session import SessionContext
from src.domain.services.editing_permission import can_edit


class MutationOutcome(str, Enum):
    """Result of a guarded resolution write."""

    APPLIED = "applied"
    EDITING_LOCKED = "editing_locked"


@dataclass(frozen=True)
class ClauseInsertResult:
    """Outcome of insert_clause.

    Attributes:
        outcome: APPLIED or EDITING_LOCKED.
        stored_text: The clause as stored (None when rejected).
        position: One-based position of the clause in its list (None when rejected).
    """

    outcome: MutationOutcome
    stored_text: str | None = None
    position: int | None = None

    @property
    def applied(self) -> bool:
        """True if the clause was written."""
        return self.outcome is MutationOutcome.APPLIED


class ResolutionService(LoggingMixin):
    """Clause and header writes for the session's active bloc.

    Example:
        >>> service = ResolutionService(gateway)
        >>> result = await service.insert_clause(session, "Urges", ClauseKind.OPERATIVE)
        >>> result.stored_text
        '1. _Urges_'
    """

    def __init__(self, gateway: DocumentGateway) -> None:
        """Initialize the service.

        Args:
            gateway: Typed document store access.
        """
        self._gateway = gateway
        self._init_logger(component="resolution")

    async def insert_clause(
        self,
        session: SessionContext,
        clause: str,
        kind: ClauseKind,
    ) -> ClauseInsertResult:
        """Append one clause to the active bloc's resolution.

        Args:
            session: The acting session.
            clause: The clause phrase to append.
            kind: Preambulatory or operative.

        Returns:
            ClauseInsertResult with APPLIED and the stored text, or
            EDITING_LOCKED if a delegate tried to write while locked.

        Raises:
            NoActiveBlocError: If the session has no active bloc, or the
                bloc no longer exists.
            InvalidInputError: If the clause is blank.
            StoreUnavailableError: If the store rejects the transaction.
        """
        bloc_name = session.require_active_bloc()
        if not clause.strip():
            raise InvalidInputError("clause", "Please choose a clause")

        log = self._log_operation(
            "insert_clause",
            committee=session.committee.value,
            bloc=bloc_name,
            kind=kind.value,
        )
        committee_doc = committee_path(session.committee)
        bloc_doc = bloc_path(session.committee, bloc_name)

        async def _append(tx: TransactionProtocol) -> ClauseInsertResult:
            committee = decode_committee(
                session.committee, await tx.get(committee_doc)
            ) or Committee.initial(session.committee)
            if not can_edit(session.role, committee.is_editing_locked):
                return ClauseInsertResult(outcome=MutationOutcome.EDITING_LOCKED)

            bloc = decode_bloc(await tx.get(bloc_doc))
            if bloc is None:
                raise NoActiveBlocError(f"Bloc '{bloc_name}' no longer exists")

            updated, stored = bloc.resolution.with_clause(clause, kind)
            tx.update(bloc_doc, {f"resolution.{kind.document_field}": list(updated.clauses(kind))})
            return ClauseInsertResult(
                outcome=MutationOutcome.APPLIED,
                stored_text=stored,
                position=len(updated.clauses(kind)),
            )

        try:
            result = await self._gateway.run_transaction(_append)
        except StoreUnavailableError as exc:
            log.error("clause_insert_failed", error=str(exc))
            raise

        if result.applied:
            log.info("clause_inserted", position=result.position)
        else:
            log.info("clause_insert_rejected", reason=result.outcome.value)
        return result

    async def save_header_fields(
        self,
        session: SessionContext,
        header: ResolutionHeader,
    ) -> MutationOutcome:
        """Replace the four header fields of the active bloc's resolution.

        A delegate blocked by the lock gets EDITING_LOCKED back and the
        rejection is only logged; no error is raised.

        Raises:
            NoActiveBlocError: If the session has no active bloc, or the
                bloc no longer exists.
            StoreUnavailableError: If the read or the write fails.
        """
        bloc_name = session.require_active_bloc()
        log = self._log_operation(
            "save_header_fields",
            committee=session.committee.value,
            bloc=bloc_name,
        )

        try:
            committee = await self._gateway.get_committee(session.committee)
            if not can_edit(session.role, committee.is_editing_locked):
                log.debug("header_save_skipped_locked")
                return MutationOutcome.EDITING_LOCKED
            await self._gateway.replace_header(session.committee, bloc_name, header)
        except DocumentNotFoundError as exc:
            raise NoActiveBlocError(f"Bloc '{bloc_name}' no longer exists") from exc
        except StoreUnavailableError as exc:
            log.error("header_save_failed", error=str(exc))
            raise

        log.debug("header_saved")
        return MutationOutcome.APPLIED
