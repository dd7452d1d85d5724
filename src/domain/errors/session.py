"""Session and credential errors.

These errors are raised before any write reaches the document store:
credential checks and precondition checks always run first.

Error handling conventions:
- InvalidCredentialsError: user-facing, NEVER retried automatically
- NoActiveCommitteeError / NoActiveBlocError: prompt the user to choose one
- RoleNotPermittedError: the presentation layer hides these actions
  from delegates, so reaching it indicates a wiring bug
"""

from __future__ import annotations

from src.domain.exceptions import ResolutionDeskError


class InvalidCredentialsError(ResolutionDeskError):
    """Raised when a committee, chair or bloc passphrase does not match.

    Also raised when a delegate tries to join a bloc that does not exist,
    so the error never reveals which of name or password was wrong.

    Usage:
        raise InvalidCredentialsError("Invalid bloc name or password")
    """

    pass


class NoActiveCommitteeError(ResolutionDeskError):
    """Raised when an operation needs a logged-in session and there is none."""

    pass


class NoActiveBlocError(ResolutionDeskError):
    """Raised when an operation needs a bloc and none is resolved.

    A delegate's active bloc is the bloc they joined; a chair's active
    bloc is the bloc currently selected for viewing. The error is also
    raised when the active bloc was deleted underneath the session.
    """

    pass


class RoleNotPermittedError(ResolutionDeskError):
    """Raised when a delegate invokes a chair-only operation.

    Attributes:
        operation: Name of the rejected operation.
    """

    def __init__(self, operation: str) -> None:
        """Initialize with the rejected operation name.

        Args:
            operation: Name of the chair-only operation.
        """
        self.operation = operation
        super().__init__(f"Only the chair may perform '{operation}'")


class SessionSupersededError(ResolutionDeskError):
    """Raised when a login is overtaken before it completes.

    A logout, or another login on the same session, started while the
    login was waiting on the identity provider or the store. The newer
    request wins and the older one leaves no context or subscriptions.
    """

    pass
