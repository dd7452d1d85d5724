"""Document store errors.

Store failures are logged at the call site that issued the operation
and then re-raised. There is NO automatic retry: the user repeats the
action. Derived view state is only ever updated by subscription
callbacks, so a failed write never corrupts what the user sees.
"""

from __future__ import annotations

from src.domain.exceptions import ResolutionDeskError


class StoreUnavailableError(ResolutionDeskError):
    """Raised when the document store cannot complete a read, write or subscribe."""

    pass


class DocumentNotFoundError(StoreUnavailableError):
    """Raised when a partial update targets a document that does not exist.

    Attributes:
        path: Path of the missing document.
    """

    def __init__(self, path: str) -> None:
        """Initialize with the missing document path.

        Args:
            path: Document path that was not found.
        """
        self.path = path
        super().__init__(f"Document not found: {path}")


class TransactionContentionError(StoreUnavailableError):
    """Raised when a transaction keeps conflicting until its attempt limit.

    Attributes:
        attempts: Number of attempts made before giving up.
    """

    def __init__(self, attempts: int) -> None:
        """Initialize with the number of attempts made.

        Args:
            attempts: How many times the transaction function ran.
        """
        self.attempts = attempts
        super().__init__(f"Transaction aborted after {attempts} conflicting attempts")


class MalformedDocumentError(ResolutionDeskError):
    """Raised when a stored document does not match its expected shape.

    Raised at the store boundary by the record ``from_document`` factories
    so the core never handles raw untyped maps.

    Attributes:
        kind: Record kind being decoded (e.g. "bloc").
        detail: What was wrong with the document.
    """

    def __init__(self, kind: str, detail: str) -> None:
        """Initialize with the record kind and problem detail.

        Args:
            kind: Record kind being decoded.
            detail: Description of the shape violation.
        """
        self.kind = kind
        self.detail = detail
        super().__init__(f"Malformed {kind} document: {detail}")
