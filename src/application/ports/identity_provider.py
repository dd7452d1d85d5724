"""Identity provider port - anonymous session identities.

The editor does not authenticate people; it only needs an opaque,
stable identifier per browser/process session so bloc membership and
comment authorship can be attributed. Passphrase checks happen in the
login service, not here.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from src.application.ports.document_store import Unsubscribe
from src.domain.models.session import UserId

AuthChangeCallback = Callable[[UserId | None], None]


class IdentityProviderProtocol(Protocol):
    """Protocol for an anonymous-session identity provider.

    Implementers MUST:
    1. Return the same UserId from every sign-in for the provider's lifetime
       until ``sign_out`` is called
    2. Invoke auth-change callbacks immediately with the current identity,
       then on every change
    """

    async def sign_in_anonymously(self) -> UserId:
        """Sign in (or reuse the existing session) and return its identity.

        Raises:
            IdentityUnavailableError: If no identity can be issued.
        """
        ...

    def current_user(self) -> UserId | None:
        """Return the signed-in identity, or None."""
        ...

    def on_auth_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        """Register a callback for identity changes."""
        ...

    async def sign_out(self) -> None:
        """Forget the current identity."""
        ...
