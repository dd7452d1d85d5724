"""System clock adapter for TimeAuthorityProtocol.

This is the only module allowed to read the wall clock directly;
everything else receives "now" through TimeAuthorityProtocol.
"""

import time
from datetime import datetime, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Production time authority backed by the host clock."""

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        """Return the host monotonic clock."""
        return time.monotonic()
