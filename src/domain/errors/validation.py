"""Input validation errors."""

from __future__ import annotations

from src.domain.exceptions import ResolutionDeskError


class InvalidInputError(ResolutionDeskError):
    """Raised when user input is malformed.

    Covers negative or non-numeric timer durations, blank bloc names
    and passwords, blank comments and blank clauses. No retry is needed;
    the presentation layer simply re-prompts.

    Attributes:
        field: Name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize with the offending field and a description.

        Args:
            field: Input field name (e.g. "minutes", "bloc_name").
            message: Human-readable description of the problem.
        """
        self.field = field
        super().__init__(message)
