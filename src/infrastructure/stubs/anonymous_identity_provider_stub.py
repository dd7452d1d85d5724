"""Anonymous identity provider stub.

Issues one opaque ``anon-<uuid>`` identity per provider instance and
keeps it until sign_out(), mirroring an anonymous browser session.
"""

from __future__ import annotations

import uuid

from src.application.ports.document_store import Unsubscribe
from src.application.ports.identity_provider import AuthChangeCallback
from src.domain.errors.identity import IdentityUnavailableError
from src.domain.models.session import UserId
from src.infrastructure.observability.logging import get_logger_for_component


class AnonymousIdentityProviderStub:
    """In-process implementation of IdentityProviderProtocol.

    Usage:
        identity = AnonymousIdentityProviderStub()
        user_id = await identity.sign_in_anonymously()
        assert await identity.sign_in_anonymously() == user_id

        # Test failure modes
        identity.set_unavailable(True)
        # sign_in_anonymously() now raises IdentityUnavailableError
    """

    def __init__(self, fixed_user_id: str | None = None) -> None:
        """Initialize signed out.

        Args:
            fixed_user_id: Identity to issue instead of a random one.
        """
        self._fixed_user_id = fixed_user_id
        self._current: UserId | None = None
        self._callbacks: list[AuthChangeCallback] = []
        self._unavailable = False
        self._sign_in_count = 0
        self._log = get_logger_for_component(self.__class__.__name__, component="identity")

    def set_unavailable(self, unavailable: bool) -> None:
        """Make sign-in fail (for testing)."""
        self._unavailable = unavailable

    @property
    def sign_in_count(self) -> int:
        """Number of identities issued."""
        return self._sign_in_count

    async def sign_in_anonymously(self) -> UserId:
        """Return the current identity, issuing one if signed out.

        Raises:
            IdentityUnavailableError: If the stub is set unavailable.
        """
        if self._current is not None:
            return self._current
        if self._unavailable:
            raise IdentityUnavailableError("Anonymous sign-in is unavailable")

        self._current = UserId(self._fixed_user_id or f"anon-{uuid.uuid4().hex}")
        self._sign_in_count += 1
        self._log.info("anonymous_identity_issued", user_id=self._current)
        self._emit()
        return self._current

    def current_user(self) -> UserId | None:
        """Return the signed-in identity, or None."""
        return self._current

    def on_auth_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        """Register ``callback``; it is called immediately with the current identity."""
        self._callbacks.append(callback)
        callback(self._current)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    async def sign_out(self) -> None:
        """Forget the current identity."""
        if self._current is None:
            return
        self._current = None
        self._emit()

    def _emit(self) -> None:
        for callback in list(self._callbacks):
            callback(self._current)
