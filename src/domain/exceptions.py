"""Base exception classes for the Resolution Desk domain layer."""


class ResolutionDeskError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so callers
    (presentation layer, scripts) can catch the whole taxonomy at once.

    Subclass families:
    - Credential and session errors (wrong passphrase, no active bloc)
    - Input validation errors (blank names, malformed timer durations)
    - Store errors (backend unavailable, malformed documents)
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
