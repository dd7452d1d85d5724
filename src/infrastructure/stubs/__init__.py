"""Infrastructure stubs for development and testing.

This module provides in-process implementations of the application
ports for local runs and tests.

Available stubs:
- InMemoryDocumentStore: Documents, optimistic transactions, server
  timestamps and push subscriptions, with injectable failures
- AnonymousIdentityProviderStub: Stable anonymous identities per provider

WARNING: The in-memory store keeps no data across processes.
A hosted document database adapter belongs in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.anonymous_identity_provider_stub import (
    AnonymousIdentityProviderStub,
)
from src.infrastructure.stubs.in_memory_document_store import (
    DEFAULT_MAX_TRANSACTION_ATTEMPTS,
    FailureMode,
    InMemoryDocumentStore,
)

__all__: list[str] = [
    "DEFAULT_MAX_TRANSACTION_ATTEMPTS",
    "AnonymousIdentityProviderStub",
    "FailureMode",
    "InMemoryDocumentStore",
]
