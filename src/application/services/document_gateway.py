"""Typed boundary over the generic document store.

The DocumentGateway is the only place that knows the persisted path
layout and converts raw document maps into tagged records. Services and
subscription callbacks above it deal exclusively in Committee, Bloc,
BlocSummary and Comment values.

Decoding rules:
- A malformed single document is reported through the subscription's
  error callback (or raised, for one-shot reads).
- A malformed entry in a collection is logged and skipped so one bad
  document does not hide the rest of the collection.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from src.application.ports.document_store import (
    DocumentSnapshot,
    DocumentStoreProtocol,
    ErrorCallback,
    ServerTimestamp,
    TransactionProtocol,
    Unsubscribe,
)
from src.application.services.base import LoggingMixin
from src.domain.errors.store import MalformedDocumentError
from src.domain.models.bloc import Bloc, BlocSummary
from src.domain.models.comment import Comment, order_comments
from src.domain.models.committee import Committee, CommitteeId
from src.domain.models.resolution import ResolutionHeader
from src.domain.models.session import UserId
from src.domain.models.timer import TimerState

T = TypeVar("T")

COMMITTEES_COLLECTION = "committees"


def committee_path(committee: CommitteeId) -> str:
    """Path of a committee document."""
    return f"{COMMITTEES_COLLECTION}/{committee.value}"


def blocs_collection_path(committee: CommitteeId) -> str:
    """Path of a committee's bloc collection."""
    return f"{committee_path(committee)}/blocs"


def bloc_path(committee: CommitteeId, bloc: str) -> str:
    """Path of a bloc document."""
    return f"{blocs_collection_path(committee)}/{bloc}"


def comments_collection_path(committee: CommitteeId, bloc: str) -> str:
    """Path of a bloc's comment collection."""
    return f"{bloc_path(committee, bloc)}/comments"


def comment_path(committee: CommitteeId, bloc: str, comment_id: str) -> str:
    """Path of one comment document."""
    return f"{comments_collection_path(committee, bloc)}/{comment_id}"


def decode_committee(committee: CommitteeId, snapshot: DocumentSnapshot) -> Committee | None:
    """Decode a committee snapshot (None when absent)."""
    if snapshot.data is None:
        return None
    return Committee.from_document(committee, snapshot.data)


def decode_bloc(snapshot: DocumentSnapshot) -> Bloc | None:
    """Decode a bloc snapshot (None when absent)."""
    if snapshot.data is None:
        return None
    return Bloc.from_document(snapshot.id, snapshot.data)


class DocumentGateway(LoggingMixin):
    """Typed access to committees, blocs and comments.

    Example:
        >>> gateway = DocumentGateway(store)
        >>> committee = await gateway.ensure_committee(CommitteeId.UNEP)
        >>> unsubscribe = gateway.watch_bloc(CommitteeId.UNEP, "Alpha", on_bloc, on_error)
    """

    def __init__(self, store: DocumentStoreProtocol) -> None:
        """Initialize the gateway.

        Args:
            store: The shared document store.
        """
        self._store = store
        self._init_logger(component="store")

    def server_timestamp(self) -> ServerTimestamp:
        """The store's server-timestamp sentinel."""
        return self._store.server_timestamp()

    async def run_transaction(self, fn: Callable[[TransactionProtocol], Awaitable[T]]) -> T:
        """Run ``fn`` as a store transaction."""
        return await self._store.run_transaction(fn)

    # =========================================================================
    # Committees
    # =========================================================================

    async def ensure_committee(self, committee: CommitteeId) -> Committee:
        """Return the committee record, creating it on first access.

        Creation runs in a transaction so two sessions logging in at once
        never overwrite each other's first write.
        """
        path = committee_path(committee)

        async def _ensure(tx: TransactionProtocol) -> tuple[Committee, bool]:
            snapshot = await tx.get(path)
            existing = decode_committee(committee, snapshot)
            if existing is not None:
                return existing, False
            initial = Committee.initial(committee)
            tx.set(path, initial.to_document())
            return initial, True

        record, created = await self._store.run_transaction(_ensure)
        if created:
            self._log_operation("ensure_committee", committee=committee.value).info(
                "committee_initialized"
            )
        return record

    async def get_committee(self, committee: CommitteeId) -> Committee:
        """Read the committee record; an absent record reads as its initial state."""
        snapshot = await self._store.get(committee_path(committee))
        return decode_committee(committee, snapshot) or Committee.initial(committee)

    async def write_timer(self, committee: CommitteeId, timer: TimerState) -> None:
        """Replace the committee timer, creating the committee if absent."""
        await self._store.set(committee_path(committee), {"timer": timer.to_document()}, merge=True)

    def watch_committee(
        self,
        committee: CommitteeId,
        on_change: Callable[[Committee | None], None],
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Subscribe to the committee record (None while it does not exist)."""

        def _deliver(snapshot: DocumentSnapshot) -> None:
            try:
                record = decode_committee(committee, snapshot)
            except MalformedDocumentError as exc:
                on_error(exc)
                return
            on_change(record)

        return self._store.subscribe(committee_path(committee), _deliver, on_error)

    # =========================================================================
    # Blocs
    # =========================================================================

    async def get_bloc(self, committee: CommitteeId, name: str) -> Bloc | None:
        """Read one bloc, or None if it does not exist."""
        return decode_bloc(await self._store.get(bloc_path(committee, name)))

    async def create_bloc(self, committee: CommitteeId, bloc: Bloc) -> None:
        """Write a new bloc document."""
        await self._store.set(bloc_path(committee, bloc.name), bloc.to_document())

    async def add_bloc_member(self, committee: CommitteeId, name: str, user_id: UserId) -> None:
        """Add ``user_id`` to the bloc's member set (idempotent)."""
        await self._store.append_to_set(bloc_path(committee, name), "members", user_id)

    async def replace_header(
        self, committee: CommitteeId, name: str, header: ResolutionHeader
    ) -> None:
        """Replace the four header fields of a bloc's resolution."""
        await self._store.update(bloc_path(committee, name), header.to_update_fields())

    async def list_blocs(self, committee: CommitteeId) -> tuple[BlocSummary, ...]:
        """Summaries of every bloc in the committee, sorted by name."""
        snapshots = await self._store.list_documents(blocs_collection_path(committee))
        return self._summaries(committee, snapshots)

    def watch_blocs(
        self,
        committee: CommitteeId,
        on_change: Callable[[tuple[BlocSummary, ...]], None],
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Subscribe to the committee's bloc summaries."""

        def _deliver(snapshots: list[DocumentSnapshot]) -> None:
            on_change(self._summaries(committee, snapshots))

        return self._store.subscribe_collection(
            blocs_collection_path(committee), _deliver, on_error
        )

    def watch_bloc(
        self,
        committee: CommitteeId,
        name: str,
        on_change: Callable[[Bloc | None], None],
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Subscribe to one bloc (None once it no longer exists)."""

        def _deliver(snapshot: DocumentSnapshot) -> None:
            try:
                record = decode_bloc(snapshot)
            except MalformedDocumentError as exc:
                on_error(exc)
                return
            on_change(record)

        return self._store.subscribe(bloc_path(committee, name), _deliver, on_error)

    # =========================================================================
    # Comments
    # =========================================================================

    async def add_comment(
        self,
        committee: CommitteeId,
        bloc: str,
        comment_id: str,
        document: dict[str, Any],
    ) -> None:
        """Write a new comment document."""
        await self._store.set(comment_path(committee, bloc, comment_id), document)

    def watch_comments(
        self,
        committee: CommitteeId,
        bloc: str,
        on_change: Callable[[tuple[Comment, ...]], None],
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Subscribe to a bloc's comments, oldest first."""

        def _deliver(snapshots: list[DocumentSnapshot]) -> None:
            comments = []
            for snapshot in snapshots:
                if snapshot.data is None:
                    continue
                try:
                    comments.append(Comment.from_document(snapshot.id, snapshot.data))
                except MalformedDocumentError as exc:
                    self._log.warning("comment_skipped", path=snapshot.path, error=str(exc))
            on_change(order_comments(comments))

        return self._store.subscribe_collection(
            comments_collection_path(committee, bloc), _deliver, on_error
        )

    def _summaries(
        self, committee: CommitteeId, snapshots: list[DocumentSnapshot]
    ) -> tuple[BlocSummary, ...]:
        summaries = []
        for snapshot in snapshots:
            try:
                bloc = decode_bloc(snapshot)
            except MalformedDocumentError as exc:
                self._log.warning(
                    "bloc_skipped",
                    committee=committee.value,
                    path=snapshot.path,
                    error=str(exc),
                )
                continue
            if bloc is not None:
                summaries.append(bloc.summary)
        return tuple(sorted(summaries, key=lambda summary: summary.name))
