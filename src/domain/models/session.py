"""Session context: who is editing, in which committee, on which bloc.

A SessionContext is created on successful login and discarded on logout.
It is never persisted and never stored in a module-level variable; the
editor session object owns it and passes it to every service call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NewType

from src.domain.errors.session import NoActiveBlocError, RoleNotPermittedError
from src.domain.models.committee import CommitteeId

UserId = NewType("UserId", str)


class Role(str, Enum):
    """Session roles."""

    CHAIR = "chair"
    DELEGATE = "delegate"


@dataclass(frozen=True)
class SessionContext:
    """Immutable description of the logged-in user.

    Attributes:
        user_id: Opaque identity issued by the identity provider.
        role: CHAIR or DELEGATE.
        committee: The committee the session is logged into.
        bloc: The bloc a delegate joined (always None for chairs).
        selected_bloc: The bloc a chair is viewing (always None for delegates).
    """

    user_id: UserId
    role: Role
    committee: CommitteeId
    bloc: str | None = None
    selected_bloc: str | None = None

    def __post_init__(self) -> None:
        """Validate role-specific fields.

        Raises:
            ValueError: If a chair carries a joined bloc or a delegate
                carries a selected bloc.
        """
        if self.role is Role.CHAIR and self.bloc is not None:
            raise ValueError("a chair does not join a bloc")
        if self.role is Role.DELEGATE and self.selected_bloc is not None:
            raise ValueError("a delegate cannot select other blocs")

    @property
    def is_chair(self) -> bool:
        """True when the session has the chair role."""
        return self.role is Role.CHAIR

    @property
    def active_bloc(self) -> str | None:
        """The joined bloc for delegates, the selected bloc for chairs."""
        return self.bloc if self.role is Role.DELEGATE else self.selected_bloc

    def require_active_bloc(self) -> str:
        """Return the active bloc name.

        Raises:
            NoActiveBlocError: If no bloc is joined or selected.
        """
        if self.active_bloc is None:
            raise NoActiveBlocError("Please select or join a bloc first")
        return self.active_bloc

    def require_chair(self, operation: str) -> None:
        """Reject chair-only operations for delegates.

        Raises:
            RoleNotPermittedError: If the session is not a chair.
        """
        if not self.is_chair:
            raise RoleNotPermittedError(operation)

    def without_bloc(self) -> SessionContext:
        """Return a copy with no joined or selected bloc."""
        return SessionContext(user_id=self.user_id, role=self.role, committee=self.committee)
