"""LoggingMixin: the structlog binding shared by every editor service.

Services call ``_init_logger()`` once and ``_log_operation()`` per
action; the returned logger carries the service name, component,
operation and the session correlation id.
"""

import structlog

from src.application.observability.correlation import get_correlation_id


class LoggingMixin:
    """Structured logging for editor services."""

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "editor") -> None:
        """Bind the service class name and ``component``."""
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Return a logger bound to ``operation``, the correlation id and ``context``."""
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
