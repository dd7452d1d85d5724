"""In-memory document store for development and testing.

This module provides an implementation of DocumentStoreProtocol that
keeps every document in a dictionary. It reproduces the behaviour the
editor relies on from a hosted document database:

1. Per-document versions with optimistic transactions and retry
2. Server timestamps resolved at commit, strictly increasing
3. Push subscriptions that deliver the current state immediately and
   after every committed change
4. Configurable failure modes for error-path tests

Every value is deep-copied on the way in and on the way out, so callers
can never mutate stored state through a reference.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Awaitable, Callable, Mapping
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TypeVar

from src.application.ports.document_store import (
    SERVER_TIMESTAMP,
    CollectionCallback,
    DocumentSnapshot,
    ErrorCallback,
    ServerTimestamp,
    SnapshotCallback,
    Unsubscribe,
)
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.domain.errors.store import (
    DocumentNotFoundError,
    StoreUnavailableError,
    TransactionContentionError,
)
from src.infrastructure.observability.logging import get_logger_for_component

T = TypeVar("T")

DEFAULT_MAX_TRANSACTION_ATTEMPTS = 25


@dataclass
class FailureMode:
    """Configuration for simulating store failures."""

    reads_fail: bool = False
    writes_fail: bool = False
    subscriptions_fail: bool = False


@dataclass
class _Record:
    data: dict[str, Any]
    version: int


@dataclass
class _Write:
    op: str
    path: str
    value: Any = None
    merge: bool = False
    field_name: str = ""


@dataclass
class _Listener:
    path: str
    on_change: Callable[[Any], None]
    on_error: ErrorCallback | None
    collection: bool
    active: bool = True


def _segments(path: str) -> list[str]:
    parts = path.split("/")
    if not path or any(not part for part in parts):
        raise ValueError(f"Invalid path: {path!r}")
    return parts


def _require_document_path(path: str) -> str:
    if len(_segments(path)) % 2 != 0:
        raise ValueError(f"Not a document path: {path!r}")
    return path


def _require_collection_path(path: str) -> str:
    if len(_segments(path)) % 2 != 1:
        raise ValueError(f"Not a collection path: {path!r}")
    return path


def _parent_collection(path: str) -> str:
    return path.rsplit("/", 1)[0]


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _deep_merge(existing, value)
        else:
            target[key] = deepcopy(value)


def _set_dotted(target: dict[str, Any], dotted: str, value: Any) -> None:
    keys = dotted.split(".")
    node = target
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = deepcopy(value)


def _has_sentinel(value: Any) -> bool:
    if isinstance(value, ServerTimestamp):
        return True
    if isinstance(value, dict):
        return any(_has_sentinel(item) for item in value.values())
    if isinstance(value, list):
        return any(_has_sentinel(item) for item in value)
    return False


def _resolve_sentinels(value: Any, timestamp: datetime) -> Any:
    if isinstance(value, ServerTimestamp):
        return timestamp
    if isinstance(value, dict):
        return {key: _resolve_sentinels(item, timestamp) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_sentinels(item, timestamp) for item in value]
    return value


class _StoreTransaction:
    """Transaction handle: tracks read versions, buffers writes."""

    def __init__(self, store: InMemoryDocumentStore) -> None:
        self._store = store
        self.reads: dict[str, int] = {}
        self.writes: list[_Write] = []

    async def get(self, path: str) -> DocumentSnapshot:
        _require_document_path(path)
        if self.writes:
            raise ValueError("Transaction reads must happen before writes")
        snapshot, version = await self._store._read_versioned(path)
        self.reads.setdefault(path, version)
        return snapshot

    def set(self, path: str, value: Mapping[str, Any], *, merge: bool = False) -> None:
        self.writes.append(
            _Write(
                op="set",
                path=_require_document_path(path),
                value=deepcopy(dict(value)),
                merge=merge,
            )
        )

    def update(self, path: str, fields: Mapping[str, Any]) -> None:
        self.writes.append(
            _Write(
                op="update",
                path=_require_document_path(path),
                value=deepcopy(dict(fields)),
            )
        )


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStoreProtocol.

    Usage:
        store = InMemoryDocumentStore(time_authority=FakeTimeAuthority())

        await store.set("committees/unep", {"isEditingLocked": False})
        snapshot = await store.get("committees/unep")

        # Test failure modes
        store.set_failure_mode(FailureMode(writes_fail=True))
        # Every write now raises StoreUnavailableError

        # Simulate an external deletion
        await store.delete("committees/unep/blocs/Alpha")

        # Reset for next test
        store.clear()
    """

    def __init__(
        self,
        time_authority: TimeAuthorityProtocol,
        *,
        latency_seconds: float = 0.0,
        max_transaction_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS,
    ) -> None:
        """Initialize an empty store.

        Args:
            time_authority: Clock used to resolve server timestamps.
            latency_seconds: Simulated round-trip delay per operation.
                Every operation yields to the event loop even at zero, so
                concurrent callers interleave.
            max_transaction_attempts: Attempts before a conflicting
                transaction gives up.
        """
        if max_transaction_attempts < 1:
            raise ValueError("max_transaction_attempts must be >= 1")
        self._time = time_authority
        self._latency = latency_seconds
        self._max_attempts = max_transaction_attempts
        self._documents: dict[str, _Record] = {}
        self._listeners: list[_Listener] = []
        self._versions = itertools.count(1)
        self._last_server_time: datetime | None = None
        self._failure_mode = FailureMode()
        self._write_count = 0
        self._read_count = 0
        self._transaction_attempts = 0
        self._retry_lane = asyncio.Lock()
        self._log = get_logger_for_component(self.__class__.__name__, component="store")

    # =========================================================================
    # Test helpers
    # =========================================================================

    def set_failure_mode(self, mode: FailureMode) -> None:
        """Configure failure simulation for testing.

        Args:
            mode: FailureMode configuration.
        """
        self._failure_mode = mode

    def clear_failure_mode(self) -> None:
        """Clear failure mode (store works normally)."""
        self._failure_mode = FailureMode()

    def clear(self) -> None:
        """Clear all state for test isolation."""
        self._documents.clear()
        for listener in self._listeners:
            listener.active = False
        self._listeners.clear()
        self._last_server_time = None
        self._failure_mode = FailureMode()
        self._write_count = 0
        self._read_count = 0
        self._transaction_attempts = 0

    @property
    def write_count(self) -> int:
        """Number of committed write operations."""
        return self._write_count

    @property
    def read_count(self) -> int:
        """Number of document reads, including transactional reads."""
        return self._read_count

    @property
    def transaction_attempts(self) -> int:
        """Total transaction function runs, including retries."""
        return self._transaction_attempts

    @property
    def listener_count(self) -> int:
        """Number of active subscriptions."""
        return sum(1 for listener in self._listeners if listener.active)

    def document(self, path: str) -> dict[str, Any] | None:
        """Synchronous deep copy of a stored document (for test assertions)."""
        record = self._documents.get(path)
        return deepcopy(record.data) if record is not None else None

    async def delete(self, path: str) -> None:
        """Remove a document, as an external administrator would.

        Sub-collections are left in place.
        """
        _require_document_path(path)
        await self._io()
        if self._documents.pop(path, None) is not None:
            self._write_count += 1
            self._log.info("document_deleted", path=path)
            self._notify({path})

    def emit_error(self, path: str, error: Exception) -> None:
        """Deliver ``error`` to every subscription on ``path``."""
        for listener in list(self._listeners):
            if listener.active and listener.path == path and listener.on_error is not None:
                listener.on_error(error)

    # =========================================================================
    # DocumentStoreProtocol
    # =========================================================================

    def server_timestamp(self) -> ServerTimestamp:
        """Return the server-timestamp sentinel."""
        return SERVER_TIMESTAMP

    async def get(self, path: str) -> DocumentSnapshot:
        """Read one document."""
        _require_document_path(path)
        snapshot, _ = await self._read_versioned(path)
        return snapshot

    async def list_documents(self, path: str) -> list[DocumentSnapshot]:
        """Read every document directly inside a collection, ordered by id."""
        _require_collection_path(path)
        await self._io()
        self._check_reads()
        self._read_count += 1
        return self._collection_snapshot(path)

    async def set(self, path: str, value: Mapping[str, Any], *, merge: bool = False) -> None:
        """Write a document, replacing it or deep-merging into it."""
        await self._commit_single(
            _Write(
                op="set",
                path=_require_document_path(path),
                value=deepcopy(dict(value)),
                merge=merge,
            )
        )

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        """Partially update an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        await self._commit_single(
            _Write(
                op="update",
                path=_require_document_path(path),
                value=deepcopy(dict(fields)),
            )
        )

    async def append_to_set(self, path: str, field: str, value: Any) -> None:
        """Add ``value`` to an array field unless already present.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        await self._commit_single(
            _Write(
                op="append",
                path=_require_document_path(path),
                value=deepcopy(value),
                field_name=field,
            )
        )

    def subscribe(
        self,
        path: str,
        on_change: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Watch one document; the current snapshot is delivered immediately."""
        _require_document_path(path)
        return self._register(_Listener(path, on_change, on_error, collection=False))

    def subscribe_collection(
        self,
        path: str,
        on_change: CollectionCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Watch a collection; the current listing is delivered immediately."""
        _require_collection_path(path)
        return self._register(_Listener(path, on_change, on_error, collection=True))

    async def run_transaction(self, fn: Callable[[_StoreTransaction], Awaitable[T]]) -> T:
        """Run ``fn`` with optimistic concurrency.

        The function is re-run from scratch whenever a document it read
        changed before its writes could commit. First attempts run
        concurrently; retries queue on a single lane and run one at a
        time, so a burst of N conflicting transactions needs at most two
        attempts each unless plain writes keep landing on the read paths.

        Raises:
            TransactionContentionError: After max_transaction_attempts conflicts.
            StoreUnavailableError: On simulated failures.
        """
        committed, result = await self._attempt_transaction(fn, attempt=1)
        if committed:
            return result

        async with self._retry_lane:
            for attempt in range(2, self._max_attempts + 1):
                committed, result = await self._attempt_transaction(fn, attempt=attempt)
                if committed:
                    return result

        self._log.warning("transaction_aborted", attempts=self._max_attempts)
        raise TransactionContentionError(self._max_attempts)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _attempt_transaction(
        self,
        fn: Callable[[_StoreTransaction], Awaitable[T]],
        *,
        attempt: int,
    ) -> tuple[bool, T]:
        self._transaction_attempts += 1
        tx = _StoreTransaction(self)
        result = await fn(tx)
        await self._io()
        if tx.writes:
            self._check_writes()
        if not self._reads_unchanged(tx.reads):
            self._log.debug("transaction_conflict", attempt=attempt, paths=sorted(tx.reads))
            return False, result
        if tx.writes:
            self._apply(tx.writes)
        return True, result

    async def _io(self) -> None:
        await asyncio.sleep(self._latency)

    def _check_reads(self) -> None:
        if self._failure_mode.reads_fail:
            raise StoreUnavailableError("Simulated read failure")

    def _check_writes(self) -> None:
        if self._failure_mode.writes_fail:
            raise StoreUnavailableError("Simulated write failure")

    async def _read_versioned(self, path: str) -> tuple[DocumentSnapshot, int]:
        await self._io()
        self._check_reads()
        self._read_count += 1
        record = self._documents.get(path)
        if record is None:
            return DocumentSnapshot(path=path, data=None), 0
        return DocumentSnapshot(path=path, data=deepcopy(record.data)), record.version

    def _reads_unchanged(self, reads: Mapping[str, int]) -> bool:
        for path, version in reads.items():
            record = self._documents.get(path)
            if (record.version if record is not None else 0) != version:
                return False
        return True

    async def _commit_single(self, write: _Write) -> None:
        await self._io()
        self._check_writes()
        self._apply([write])

    def _next_server_time(self) -> datetime:
        now = self._time.now()
        if self._last_server_time is not None and now <= self._last_server_time:
            now = self._last_server_time + timedelta(microseconds=1)
        self._last_server_time = now
        return now

    def _apply(self, writes: list[_Write]) -> None:
        """Stage every write, then commit them all or none."""
        if any(_has_sentinel(write.value) for write in writes):
            timestamp = self._next_server_time()
        else:
            timestamp = self._time.now()
        staged: dict[str, dict[str, Any] | None] = {}

        for write in writes:
            if write.path not in staged:
                record = self._documents.get(write.path)
                staged[write.path] = deepcopy(record.data) if record is not None else None
            current = staged[write.path]
            value = _resolve_sentinels(write.value, timestamp)

            if write.op == "set":
                if write.merge and current is not None:
                    _deep_merge(current, value)
                else:
                    staged[write.path] = value
            elif write.op == "update":
                if current is None:
                    raise DocumentNotFoundError(write.path)
                for dotted, item in value.items():
                    _set_dotted(current, dotted, item)
            elif write.op == "append":
                if current is None:
                    raise DocumentNotFoundError(write.path)
                existing = current.get(write.field_name)
                items = list(existing) if isinstance(existing, list) else []
                if value not in items:
                    items.append(value)
                current[write.field_name] = items
            else:
                raise ValueError(f"Unknown write operation: {write.op}")

        for path, data in staged.items():
            if data is not None:
                self._documents[path] = _Record(data=data, version=next(self._versions))
        self._write_count += len(writes)
        self._notify(set(staged))

    def _collection_snapshot(self, collection: str) -> list[DocumentSnapshot]:
        return [
            DocumentSnapshot(path=path, data=deepcopy(record.data))
            for path, record in sorted(self._documents.items())
            if _parent_collection(path) == collection
        ]

    def _payload(self, listener: _Listener) -> Any:
        if listener.collection:
            return self._collection_snapshot(listener.path)
        record = self._documents.get(listener.path)
        return DocumentSnapshot(
            path=listener.path,
            data=deepcopy(record.data) if record is not None else None,
        )

    def _register(self, listener: _Listener) -> Unsubscribe:
        if self._failure_mode.subscriptions_fail:
            error = StoreUnavailableError(f"Simulated subscription failure: {listener.path}")
            if listener.on_error is None:
                raise error
            listener.on_error(error)
            return lambda: None

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener.active:
                listener.active = False
                self._listeners.remove(listener)

        self._deliver(listener)
        return _unsubscribe

    def _deliver(self, listener: _Listener) -> None:
        if not listener.active:
            return
        try:
            listener.on_change(self._payload(listener))
        except Exception as e:
            self._log.error(
                "listener_failed",
                path=listener.path,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _notify(self, changed: set[str]) -> None:
        collections = {_parent_collection(path) for path in changed}
        for listener in list(self._listeners):
            if listener.collection and listener.path in collections:
                self._deliver(listener)
            elif not listener.collection and listener.path in changed:
                self._deliver(listener)
