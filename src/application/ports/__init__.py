"""Application ports - Abstract interfaces for infrastructure adapters.

Available ports:
- DocumentStoreProtocol: Shared hierarchical document store
- IdentityProviderProtocol: Anonymous session identities
- TimeAuthorityProtocol: Injected clock
- EditorViewListener: Presentation-layer sink for derived view state
"""

from src.application.ports.document_store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStoreProtocol,
    ServerTimestamp,
    TransactionProtocol,
    Unsubscribe,
)
from src.application.ports.identity_provider import IdentityProviderProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.ports.view_listener import EditorViewListener

__all__: list[str] = [
    "SERVER_TIMESTAMP",
    "DocumentSnapshot",
    "DocumentStoreProtocol",
    "EditorViewListener",
    "IdentityProviderProtocol",
    "ServerTimestamp",
    "TimeAuthorityProtocol",
    "TransactionProtocol",
    "Unsubscribe",
]
