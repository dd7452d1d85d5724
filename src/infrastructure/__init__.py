"""
Infrastructure layer - Port implementations for Resolution Desk.

This layer contains:
- In-memory document store (stubs)
- Anonymous identity provider (stubs)
- System clock (adapters)
- structlog configuration (observability)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

__all__: list[str] = []
