"""Document store port - hierarchical documents with push subscriptions.

This port describes the generic document database the editor runs on:
named documents addressed by ``/``-separated paths, grouped in
collections, with per-document subscriptions and optimistic
transactions.

Path layout used by the editor:
    committees/{committeeId}
    committees/{committeeId}/blocs/{blocName}
    committees/{committeeId}/blocs/{blocName}/comments/{commentId}

A path with an even number of segments names a document; an odd number
names a collection.

Consistency model:
- Each document is last-writer-wins.
- There is NO ordering across documents.
- A transaction is serializable relative to every other write on the
  documents it read: if any of them changed before commit, the whole
  transaction function runs again.

Failure contract:
Implementations raise StoreUnavailableError (or a subclass such as
DocumentNotFoundError or TransactionContentionError). They never return
partial results.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

T = TypeVar("T")

Unsubscribe = Callable[[], None]
"""Stops a subscription. Calling it more than once is a no-op."""


class ServerTimestamp:
    """Sentinel replaced by the store's own clock when a write commits.

    Using the store's clock instead of the writer's keeps every observer
    on one time base regardless of client clock skew.
    """

    _instance: ServerTimestamp | None = None

    def __new__(cls) -> ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time copy of one document.

    Attributes:
        path: Full document path.
        data: Document contents, or None when the document does not exist.
    """

    path: str
    data: Mapping[str, Any] | None

    @property
    def exists(self) -> bool:
        """True if the document existed when the snapshot was taken."""
        return self.data is not None

    @property
    def id(self) -> str:
        """Last path segment (the document id within its collection)."""
        return self.path.rsplit("/", 1)[-1]


SnapshotCallback = Callable[[DocumentSnapshot], None]
CollectionCallback = Callable[[list[DocumentSnapshot]], None]
ErrorCallback = Callable[[Exception], None]


class TransactionProtocol(Protocol):
    """Read-modify-write unit passed to ``run_transaction`` functions.

    Reads are tracked; writes are buffered and only applied if every
    document read is unchanged at commit time.
    """

    async def get(self, path: str) -> DocumentSnapshot:
        """Read a document inside the transaction."""
        ...

    def set(self, path: str, value: Mapping[str, Any], *, merge: bool = False) -> None:
        """Buffer a full (or merged) document write."""
        ...

    def update(self, path: str, fields: Mapping[str, Any]) -> None:
        """Buffer a partial update; dotted keys address nested fields."""
        ...


class DocumentStoreProtocol(Protocol):
    """Protocol for the shared document store.

    Usage:
        snapshot = await store.get("committees/unep")
        await store.update("committees/unep/blocs/Alpha", {"resolution.forum": "GA"})

        unsubscribe = store.subscribe("committees/unep", on_change, on_error)
        ...
        unsubscribe()

        async def bump(tx: TransactionProtocol) -> int:
            snap = await tx.get(path)
            ...
            tx.update(path, {...})
            return value

        result = await store.run_transaction(bump)
    """

    async def get(self, path: str) -> DocumentSnapshot:
        """Read one document.

        Returns:
            A snapshot; ``exists`` is False when the document is absent.

        Raises:
            StoreUnavailableError: If the read cannot be served.
        """
        ...

    async def set(self, path: str, value: Mapping[str, Any], *, merge: bool = False) -> None:
        """Write a whole document, or deep-merge into it when ``merge`` is True.

        Raises:
            StoreUnavailableError: If the write cannot be applied.
        """
        ...

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        """Replace selected fields of an existing document.

        Keys may be dotted (``"resolution.forum"``) to address nested maps.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            StoreUnavailableError: If the write cannot be applied.
        """
        ...

    async def append_to_set(self, path: str, field: str, value: Any) -> None:
        """Add ``value`` to the array at ``field`` unless already present.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            StoreUnavailableError: If the write cannot be applied.
        """
        ...

    async def list_documents(self, path: str) -> list[DocumentSnapshot]:
        """Read every document directly inside a collection, ordered by id.

        Raises:
            StoreUnavailableError: If the read cannot be served.
        """
        ...

    def subscribe(
        self,
        path: str,
        on_change: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Watch one document.

        ``on_change`` receives the current snapshot immediately and again
        after every committed change. ``on_error`` receives failures of
        the subscription itself.
        """
        ...

    def subscribe_collection(
        self,
        path: str,
        on_change: CollectionCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Watch every document directly inside a collection.

        ``on_change`` receives the full, id-ordered list of documents
        immediately and after every committed change in the collection.
        """
        ...

    async def run_transaction(self, fn: Callable[[TransactionProtocol], Awaitable[T]]) -> T:
        """Run ``fn`` as an optimistic transaction and return its result.

        ``fn`` may run more than once; it must not have side effects
        outside the transaction object.

        Raises:
            TransactionContentionError: If conflicts persist past the
                implementation's attempt limit.
            StoreUnavailableError: If the commit cannot be applied.
        """
        ...

    def server_timestamp(self) -> ServerTimestamp:
        """Return the sentinel resolved to the store clock on commit."""
        ...
