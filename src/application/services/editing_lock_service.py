"""Editing lock gate.

The lock is a single boolean on the committee record. Only a chair may
flip it; the flip has no other side effect. Permission is never cached:
every consumer re-derives it from the latest committee snapshot with
can_edit().
"""

from __future__ import annotations

from src.application.ports.document_store import TransactionProtocol
from src.application.services.base import LoggingMixin
from src.application.services.document_gateway import (
    DocumentGateway,
    committee_path,
    decode_committee,
)
from src.domain.errors.store import StoreUnavailableError
from src.domain.models.committee import Committee
from src.domain.models.session import SessionContext


class EditingLockService(LoggingMixin):
    """Chair-only lock toggling."""

    def __init__(self, gateway: DocumentGateway) -> None:
        self._gateway = gateway
        self._init_logger(component="lock")

    async def toggle_lock(self, session: SessionContext) -> bool:
        """Flip the committee's editing lock.

        Returns:
            The new value of ``isEditingLocked``.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
            StoreUnavailableError: If the transaction fails.
        """
        session.require_chair("toggle_lock")
        log = self._log_operation("toggle_lock", committee=session.committee.value)
        path = committee_path(session.committee)

        async def _flip(tx: TransactionProtocol) -> bool:
            committee = decode_committee(
                session.committee, await tx.get(path)
            ) or Committee.initial(session.committee)
            locked = not committee.is_editing_locked
            tx.set(path, {"isEditingLocked": locked}, merge=True)
            return locked

        try:
            locked = await self._gateway.run_transaction(_flip)
        except StoreUnavailableError as exc:
            log.error("lock_toggle_failed", error=str(exc))
            raise

        log.info("editing_lock_toggled", is_editing_locked=locked)
        return locked
