"""Bloc registry errors."""

from __future__ import annotations

from src.domain.exceptions import ResolutionDeskError


class NameTakenError(ResolutionDeskError):
    """Raised when a bloc with the requested name already exists.

    The existing bloc (and its password) is left untouched. The user
    should retry with a different name.

    Attributes:
        committee: Committee identifier the bloc belongs to.
        name: The conflicting bloc name.
    """

    def __init__(self, committee: str, name: str) -> None:
        """Initialize with the conflicting committee and bloc name.

        Args:
            committee: Committee identifier.
            name: Bloc name that is already in use.
        """
        self.committee = committee
        self.name = name
        super().__init__(f"Bloc name '{name}' already exists in committee '{committee}'")
