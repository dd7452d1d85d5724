"""Live subscription bookkeeping for one editor session.

Each ResourceKind has at most one live subscription. Replacing it
closes the previous subscription before the new one is opened, and
every subscription carries a generation number so a callback from a
closed subscription that is still in flight is dropped instead of
updating the view.

Typical flow:
    1. Login opens COMMITTEE and BLOC_LIST (plus BLOC and COMMENTS for
       a delegate).
    2. A chair selecting a bloc replaces BLOC and COMMENTS.
    3. Logout calls close_all().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.application.ports.document_store import Unsubscribe
from src.application.services.base import LoggingMixin


class ResourceKind(str, Enum):
    """The resources a session can be subscribed to."""

    COMMITTEE = "committee"
    BLOC_LIST = "bloc_list"
    BLOC = "bloc"
    COMMENTS = "comments"


class SubscriptionHandle:
    """Identity of one opened subscription.

    Callbacks passed to the store are wrapped through ``wrap`` so they
    become no-ops once the handle is no longer current.
    """

    def __init__(self, manager: SubscriptionManager, kind: ResourceKind, generation: int) -> None:
        self._manager = manager
        self.kind = kind
        self.generation = generation

    @property
    def is_current(self) -> bool:
        """True while this handle is the live subscription for its kind."""
        return self._manager.current_generation(self.kind) == self.generation

    def wrap(self, callback: Callable[..., None]) -> Callable[..., None]:
        """Return ``callback`` guarded against stale deliveries."""

        def _guarded(*args: Any) -> None:
            if self.is_current:
                callback(*args)

        return _guarded


@dataclass
class _Entry:
    resource_id: str
    generation: int
    unsubscribe: Unsubscribe | None = None


class SubscriptionManager(LoggingMixin):
    """Owns every live subscription of one editor session.

    Example:
        >>> manager = SubscriptionManager()
        >>> manager.replace(
        ...     ResourceKind.BLOC,
        ...     "unep/Alpha",
        ...     lambda handle: gateway.watch_bloc(
        ...         CommitteeId.UNEP, "Alpha", handle.wrap(on_bloc), handle.wrap(on_error)
        ...     ),
        ... )
        True
    """

    def __init__(self) -> None:
        self._entries: dict[ResourceKind, _Entry] = {}
        self._generation = 0
        self._init_logger(component="subscriptions")

    def current_generation(self, kind: ResourceKind) -> int | None:
        """Generation of the live subscription for ``kind``, if any."""
        entry = self._entries.get(kind)
        return entry.generation if entry is not None else None

    def active(self) -> dict[ResourceKind, str]:
        """Map of live resource kinds to their resource ids."""
        return {kind: entry.resource_id for kind, entry in self._entries.items()}

    def is_active(self, kind: ResourceKind, resource_id: str) -> bool:
        """True if ``kind`` is currently subscribed to ``resource_id``."""
        entry = self._entries.get(kind)
        return entry is not None and entry.resource_id == resource_id

    def replace(
        self,
        kind: ResourceKind,
        resource_id: str,
        subscribe: Callable[[SubscriptionHandle], Unsubscribe],
    ) -> bool:
        """Make ``resource_id`` the live subscription for ``kind``.

        Re-selecting the resource that is already live is a no-op.
        Otherwise the previous subscription is closed first, then
        ``subscribe`` is called with a fresh handle. The store may deliver
        the initial snapshot synchronously from inside ``subscribe``.

        Args:
            kind: Which resource slot to fill.
            resource_id: Identity of the resource (used for no-op detection).
            subscribe: Opens the subscription and returns its unsubscribe.

        Returns:
            True if a new subscription was opened, False for a no-op.
        """
        if self.is_active(kind, resource_id):
            return False

        self.close(kind)
        self._generation += 1
        entry = _Entry(resource_id=resource_id, generation=self._generation)
        self._entries[kind] = entry
        handle = SubscriptionHandle(self, kind, entry.generation)

        try:
            unsubscribe = subscribe(handle)
        except Exception:
            if self._entries.get(kind) is entry:
                del self._entries[kind]
            raise

        if self._entries.get(kind) is not entry:
            # Closed from inside the initial delivery.
            unsubscribe()
            return True

        entry.unsubscribe = unsubscribe
        self._log.debug(
            "subscription_opened",
            kind=kind.value,
            resource_id=resource_id,
            generation=entry.generation,
        )
        return True

    def close(self, kind: ResourceKind) -> None:
        """Close the live subscription for ``kind`` (no-op if none)."""
        entry = self._entries.pop(kind, None)
        if entry is None:
            return
        if entry.unsubscribe is not None:
            entry.unsubscribe()
        self._log.debug(
            "subscription_closed",
            kind=kind.value,
            resource_id=entry.resource_id,
            generation=entry.generation,
        )

    def close_all(self) -> None:
        """Close every live subscription."""
        for kind in list(self._entries):
            self.close(kind)
