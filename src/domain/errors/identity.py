"""Identity provider errors."""

from __future__ import annotations

from src.domain.exceptions import ResolutionDeskError


class IdentityUnavailableError(ResolutionDeskError):
    """Raised when the identity provider cannot issue an anonymous identity."""

    pass
