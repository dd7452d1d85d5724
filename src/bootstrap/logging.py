"""Bootstrap wiring for logging configuration.

Logging is configured once per process; later calls are no-ops until
reset_logging() is called.
"""

from __future__ import annotations

from src.infrastructure.observability import configure_structlog

_configured_environment: str | None = None


def configure_logging(environment: str) -> None:
    """Configure structlog for ``environment`` unless already configured."""
    global _configured_environment
    if _configured_environment is not None:
        return
    configure_structlog(environment=environment)
    _configured_environment = environment


def reset_logging() -> None:
    """Allow the next configure_logging() call to reconfigure (for testing)."""
    global _configured_environment
    _configured_environment = None


__all__ = ["configure_logging", "reset_logging"]
