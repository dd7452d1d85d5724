"""Observability infrastructure: structlog configuration.

Usage:
    from src.infrastructure.observability import configure_structlog

    # At startup
    configure_structlog(environment="production")

Correlation ids live in src.application.observability so services can
bind them without importing infrastructure.
"""

from src.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_component,
)

__all__: list[str] = [
    "configure_structlog",
    "get_logger_for_component",
]
